"""
Flask middleware for request processing.

Provides:
- Correlation ID injection
- Request metrics collection
- Error handling
"""

import time
from flask import request, g
from werkzeug.exceptions import HTTPException

from ..observability import request_context, get_logger, metrics
from .errors import AppError, NotFoundError, error_response

logger = get_logger(__name__)


def correlation_id_middleware(app):
    """
    Bind a correlation ID to every request.

    The ID is taken from the ``X-Correlation-ID`` header when present,
    otherwise generated, and echoed back on the response.
    """

    @app.before_request
    def before_request():
        correlation_id = request.headers.get('X-Correlation-ID')

        ctx = request_context(correlation_id)
        ctx.__enter__()
        ctx.bind(method=request.method, path=request.path)

        g.request_context = ctx

        logger.debug("Request started", extra=ctx.log_extra(remote_addr=request.remote_addr))

    @app.after_request
    def after_request(response):
        if hasattr(g, 'request_context'):
            ctx = g.request_context
            response.headers['X-Correlation-ID'] = ctx.correlation_id

            logger.info(
                "Request completed",
                extra=ctx.log_extra(status_code=response.status_code, duration_ms=ctx.elapsed_ms)
            )

        return response

    @app.teardown_request
    def teardown_request(exc=None):
        if hasattr(g, 'request_context'):
            g.request_context.__exit__(None, None, None)


def metrics_middleware(app):
    """Track request counts and latencies per endpoint and status."""

    @app.before_request
    def before_request_metrics():
        g.metrics_start_time = time.time()

    @app.after_request
    def after_request_metrics(response):
        if hasattr(g, 'metrics_start_time'):
            duration_ms = (time.time() - g.metrics_start_time) * 1000
            # Endpoint names keep flag names out of the tag space
            endpoint = request.endpoint or 'unknown'

            metrics.increment("http_requests_total", tags={
                "method": request.method,
                "endpoint": endpoint,
                "status": str(response.status_code)
            })

            metrics.timing("http_request_duration_ms", duration_ms, tags={
                "method": request.method,
                "endpoint": endpoint
            })

        return response


def error_handler_middleware(app):
    """Convert exceptions into JSON error envelopes."""

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        logger.warning(
            f"Application error: {error.message}",
            extra={'error_code': error.code, 'status_code': error.status_code}
        )

        metrics.increment("app_errors_total", tags={
            "error_code": error.code,
            "status_code": str(error.status_code)
        })

        return error_response(error)

    @app.errorhandler(404)
    def handle_404(error):
        not_found = NotFoundError(
            f"Endpoint not found: {request.path}",
            details={"path": request.path, "method": request.method}
        )
        return error_response(not_found)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        app_error = AppError(error.description or error.name, details={"path": request.path})
        app_error.code = error.name.upper().replace(' ', '_')
        app_error.status_code = error.code or 500
        return error_response(app_error)

    @app.errorhandler(Exception)
    def handle_exception(error: Exception):
        logger.exception(
            "Unhandled exception",
            exc_info=error,
            extra={'path': request.path, 'error_type': type(error).__name__}
        )

        app_error = AppError(
            "An unexpected error occurred",
            details={
                "path": request.path,
                "error_type": type(error).__name__
            }
        )

        metrics.increment("unhandled_exceptions_total", tags={
            "error_type": type(error).__name__
        })

        return error_response(app_error)


def setup_middleware(app, enable_metrics: bool = True):
    """
    Setup all middleware for a Flask application.

    Usage:
        app = Flask(__name__)
        setup_middleware(app, enable_metrics=settings.enable_metrics)
    """
    error_handler_middleware(app)

    if enable_metrics:
        metrics_middleware(app)

    correlation_id_middleware(app)

    logger.debug("Middleware configured", extra={'app_name': app.name})
