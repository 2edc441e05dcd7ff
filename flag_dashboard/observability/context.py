"""
Correlation IDs for log lines.

The middleware opens a RequestContext per HTTP request; the dashboard
page, the backend calls it triggers and any error it logs then share one
``req_...`` ID. The dashboard forwards nothing to the backend, so each
process keeps its own IDs.
"""

import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

_correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


def new_correlation_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> None:
    _correlation_id.set(correlation_id)


class RequestContext:
    """
    Binds a correlation ID while active and carries per-request log fields.

    Usage:
        with request_context(request.headers.get('X-Correlation-ID')) as ctx:
            ctx.bind(method='POST', path='/toggle')
            logger.info("Request completed", extra=ctx.log_extra(status_code=302))
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or new_correlation_id()
        self.fields: Dict[str, Any] = {}
        self._started = time.perf_counter()
        self._outer_id: Optional[str] = None

    def __enter__(self) -> 'RequestContext':
        self._outer_id = _correlation_id.get()
        _correlation_id.set(self.correlation_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _correlation_id.set(self._outer_id)

    def bind(self, **fields: Any) -> None:
        """Attach fields to every ``log_extra()`` of this request."""
        self.fields.update(fields)

    def log_extra(self, **fields: Any) -> Dict[str, Any]:
        """Bound fields plus ``fields``, for a logging call's ``extra``."""
        return {'correlation_id': self.correlation_id, **self.fields, **fields}

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)


def request_context(correlation_id: Optional[str] = None) -> RequestContext:
    """Context for one request; a new ID is generated when none is given."""
    return RequestContext(correlation_id)
