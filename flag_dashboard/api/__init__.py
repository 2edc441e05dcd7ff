"""
Shared HTTP layer for the dashboard and the development backend.

Provides:
- Standardized error responses
- Request/response middleware
"""

from .errors import (
    AppError,
    ValidationError,
    NotFoundError,
    ConflictError,
    error_response,
    make_success_response
)

from .middleware import (
    correlation_id_middleware,
    metrics_middleware,
    error_handler_middleware,
    setup_middleware
)

__all__ = [
    # Errors
    'AppError',
    'ValidationError',
    'NotFoundError',
    'ConflictError',
    'error_response',
    'make_success_response',

    # Middleware
    'correlation_id_middleware',
    'metrics_middleware',
    'error_handler_middleware',
    'setup_middleware',
]
