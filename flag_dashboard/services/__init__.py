"""
Service layer.

Keeps backend calls and dashboard state out of the Flask views so they
can be tested without HTTP routing.
"""

from .base_service import BaseService, ServiceError
from .models import FeatureFlag
from .flags_client import FlagsApiClient, FlagsApiError, FlagsApiConnectionError
from .dashboard_service import DashboardService
from .health_service import HealthService

__all__ = [
    'BaseService',
    'ServiceError',
    'FeatureFlag',
    'FlagsApiClient',
    'FlagsApiError',
    'FlagsApiConnectionError',
    'DashboardService',
    'HealthService',
]
