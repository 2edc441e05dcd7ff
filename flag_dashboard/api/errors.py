"""
Standardized error handling for JSON responses.

Used by the dashboard's JSON endpoints and by the development backend so
both report errors with the same envelope and HTTP status codes.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
from flask import jsonify

from ..observability import get_correlation_id


class AppError(Exception):
    """
    Base application error.

    All custom exceptions should inherit from this class.
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "correlation_id": get_correlation_id() or "none",
                "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
            }
        }


class ValidationError(AppError):
    """Request validation error (400 Bad Request)."""
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(AppError):
    """Resource not found (404 Not Found)."""
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(AppError):
    """Resource already exists (409 Conflict)."""
    code = "CONFLICT"
    status_code = 409


def error_response(error: AppError):
    """
    Create a Flask JSON response from an AppError.

    Example:
        try:
            ...
        except ValidationError as e:
            return error_response(e)
    """
    response = jsonify(error.to_dict())
    response.status_code = error.status_code
    return response


def make_success_response(data: Dict[str, Any], status_code: int = 200):
    """
    Create a standardized success response.

    Example:
        return make_success_response({'status': 'healthy'})
    """
    response_data = {
        "success": True,
        "correlation_id": get_correlation_id() or "none",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        **data
    }

    response = jsonify(response_data)
    response.status_code = status_code
    return response
