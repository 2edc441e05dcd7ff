"""
Base service class with common functionality.

Provides:
- Logging with correlation ID tracking
- Retry logic with exponential backoff
- Metrics helpers (counters, timings, gauges)
"""

from typing import Optional, Callable
import functools
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from ..observability import get_logger, get_correlation_id, metrics


class ServiceError(Exception):
    """Base exception for service layer errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BaseService:
    """
    Base class for all services.

    Provides common functionality like logging, retries and metrics.
    Keyword arguments given to the ``log_*`` helpers end up as structured
    fields on the log record, so they must not shadow ``LogRecord``
    attributes such as ``name`` or ``message``.
    """

    def __init__(self, service_name: Optional[str] = None):
        self.service_name = service_name or self.__class__.__name__
        self.logger = get_logger(f"flag_dashboard.services.{self.service_name.lower()}")

    def log_info(self, message: str, **kwargs):
        extra = {'correlation_id': get_correlation_id(), **kwargs}
        self.logger.info(message, extra=extra)

    def log_error(self, message: str, exc: Optional[Exception] = None, **kwargs):
        """
        Log an error message with correlation ID.

        Args:
            message: Log message
            exc: Optional exception to log
            **kwargs: Additional context for logging
        """
        extra = {'correlation_id': get_correlation_id(), **kwargs}
        if exc:
            self.logger.error(f"{message}: {str(exc)}", exc_info=exc, extra=extra)
        else:
            self.logger.error(message, extra=extra)

    def log_warning(self, message: str, **kwargs):
        extra = {'correlation_id': get_correlation_id(), **kwargs}
        self.logger.warning(message, extra=extra)

    def log_debug(self, message: str, **kwargs):
        extra = {'correlation_id': get_correlation_id(), **kwargs}
        self.logger.debug(message, extra=extra)

    def with_retry(
        self,
        max_attempts: int = 3,
        exceptions: tuple = (Exception,),
        wait_multiplier: float = 1,
        wait_min: float = 0,
        wait_max: float = 10
    ):
        """
        Decorator for retrying operations with exponential backoff.

        Args:
            max_attempts: Total number of attempts, including the first one
            exceptions: Tuple of exceptions to retry on
            wait_multiplier: Backoff multiplier in seconds
            wait_min: Minimum wait time in seconds
            wait_max: Maximum wait time in seconds

        Example:
            fetch = self.with_retry(max_attempts=3, exceptions=(FlagsApiConnectionError,))(self._fetch)
        """
        def decorator(func: Callable) -> Callable:
            @retry(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=wait_multiplier, min=wait_min, max=wait_max),
                retry=retry_if_exception_type(exceptions),
                reraise=True
            )
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                return func(*args, **kwargs)
            return wrapper
        return decorator

    def increment_counter(self, counter_name: str, value: int = 1, tags: Optional[dict] = None):
        if tags is None:
            tags = {}

        tags['service'] = self.service_name.lower()
        metrics.increment(counter_name, value, tags=tags)

    def record_timing(self, operation_name: str, duration_ms: float, tags: Optional[dict] = None):
        if tags is None:
            tags = {}

        tags['service'] = self.service_name.lower()
        metrics.timing(operation_name, duration_ms, tags=tags)

    def set_gauge(self, gauge_name: str, value: float, tags: Optional[dict] = None):
        if tags is None:
            tags = {}

        tags['service'] = self.service_name.lower()
        metrics.gauge(gauge_name, value, tags=tags)
