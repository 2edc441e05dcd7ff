"""
HTTP client for the feature flags REST backend.

The backend exposes one collection endpoint:

    GET    {base}          -> {"<name>": <bool>, ...}
    POST   {base}          <- {"name": str, "isEnabled": bool}
    PUT    {base}/{name}   <- {"isEnabled": bool}
    DELETE {base}/{name}
"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .base_service import BaseService, ServiceError
from .models import FeatureFlag
from ..config import settings


class FlagsApiError(ServiceError):
    """Backend call failed or answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.status_code = status_code


class FlagsApiConnectionError(FlagsApiError):
    """Backend could not be reached (connection refused, timeout, ...)."""


class FlagsApiClient(BaseService):
    """
    Thin wrapper over ``requests`` for the flags endpoint.

    Every method either returns normally or raises ``FlagsApiError``; the
    caller decides whether a failure is logged or reported. Only reads are
    retried, and only on connection errors. Redirects are not followed and
    count as failures.

    Example:
        client = FlagsApiClient('http://localhost:3000/flags')
        for flag in client.list_flags():
            print(flag.name, flag.is_enabled)
        client.update_flag('new_checkout', True)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
        retry_wait: float = 1.0
    ):
        super().__init__("FlagsApiClient")
        self.base_url = (base_url or settings.flags_api.base_url).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.flags_api.timeout
        self.max_retries = max_retries if max_retries is not None else settings.flags_api.max_retries
        self.retry_wait = retry_wait

        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers['Accept'] = 'application/json'
        self.session = session

    def flag_url(self, flag_name: str) -> str:
        """URL of a single flag; the name is encoded as one path segment."""
        return f"{self.base_url}/{quote(flag_name, safe='')}"

    def list_flags(self) -> List[FeatureFlag]:
        """
        Fetch all flags in the order the backend returns them.

        Raises:
            FlagsApiError: Backend unreachable, error status or malformed body
        """
        fetch = self.with_retry(
            max_attempts=self.max_retries + 1,
            exceptions=(FlagsApiConnectionError,),
            wait_multiplier=self.retry_wait,
            wait_max=max(self.retry_wait * 8, 0)
        )(self._fetch_flag_map)

        data = fetch()

        flags = []
        for flag_name, value in data.items():
            if not isinstance(value, bool):
                self.log_warning(
                    f"Flag '{flag_name}' has non-boolean value {value!r}, coercing",
                    flag_name=flag_name
                )
            flags.append(FeatureFlag.from_entry(flag_name, value))

        self.log_debug(f"Fetched {len(flags)} flags", operation='list')
        return flags

    def create_flag(self, flag: FeatureFlag) -> None:
        """POST a new flag."""
        self._request('create', 'POST', self.base_url, json=flag.to_payload())
        self.log_info(f"Created flag '{flag.name}'", flag_name=flag.name, operation='create')

    def update_flag(self, flag_name: str, is_enabled: bool) -> None:
        """PUT the enabled state of an existing flag."""
        self._request('update', 'PUT', self.flag_url(flag_name), json={'isEnabled': is_enabled})
        self.log_info(
            f"Flag '{flag_name}' set to {is_enabled}",
            flag_name=flag_name,
            operation='update'
        )

    def delete_flag(self, flag_name: str) -> None:
        """DELETE a flag."""
        self._request('delete', 'DELETE', self.flag_url(flag_name))
        self.log_info(f"Deleted flag '{flag_name}'", flag_name=flag_name, operation='delete')

    def ping(self) -> Dict[str, Any]:
        """
        Probe the backend once.

        Returns:
            {"status": "up"|"down", "latency_ms": int, "error": str (when down)}
        """
        start_time = time.time()
        try:
            self._request('ping', 'GET', self.base_url)
        except FlagsApiError as e:
            return {
                'status': 'down',
                'latency_ms': int((time.time() - start_time) * 1000),
                'error': e.message
            }

        return {
            'status': 'up',
            'latency_ms': int((time.time() - start_time) * 1000)
        }

    def close(self):
        if self._owns_session:
            self.session.close()

    def _fetch_flag_map(self) -> Dict[str, Any]:
        response = self._request('list', 'GET', self.base_url)

        try:
            data = response.json()
        except ValueError as e:
            raise FlagsApiError(
                "Flags endpoint returned a non-JSON body",
                status_code=response.status_code,
                details={'url': self.base_url}
            ) from e

        if not isinstance(data, dict):
            raise FlagsApiError(
                f"Flags endpoint returned {type(data).__name__}, expected an object",
                status_code=response.status_code,
                details={'url': self.base_url}
            )

        return data

    def _request(self, operation: str, method: str, url: str, **kwargs) -> requests.Response:
        start_time = time.time()

        try:
            # A redirect would replay a PUT or DELETE against another flag
            response = self.session.request(method, url, timeout=self.timeout, allow_redirects=False, **kwargs)
        except requests.RequestException as e:
            self._record(operation, 'unreachable', start_time)
            raise FlagsApiConnectionError(
                f"{method} {url} failed: {e}",
                details={'url': url, 'operation': operation}
            ) from e

        self._record(operation, str(response.status_code), start_time)

        if response.status_code >= 300:
            raise FlagsApiError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={'url': url, 'operation': operation, 'body': response.text[:200]}
            )

        return response

    def _record(self, operation: str, status: str, start_time: float):
        duration_ms = (time.time() - start_time) * 1000
        self.increment_counter('flags_api_requests_total', tags={'operation': operation, 'status': status})
        self.record_timing('flags_api_latency_ms', duration_ms, tags={'operation': operation})
