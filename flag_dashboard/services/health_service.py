"""
Health check service for the dashboard.

Reports whether the flags backend answers and includes the in-memory
metrics summary.
"""

from typing import Any, Dict
from datetime import datetime, timezone

from .base_service import BaseService
from .flags_client import FlagsApiClient
from ..observability import metrics
from .. import __version__


class HealthService(BaseService):
    """
    Builds the payload served by ``GET /health``.

    Example:
        health = HealthService(client).get_system_health()
        if health['status'] != 'healthy':
            ...
    """

    def __init__(self, client: FlagsApiClient):
        super().__init__("HealthService")
        self.client = client

    def check_backend(self) -> Dict[str, Any]:
        result = self.client.ping()
        result['url'] = self.client.base_url

        if result['status'] != 'up':
            self.log_warning(
                f"Flags backend is down: {result.get('error')}",
                operation='ping'
            )

        return result

    def get_system_health(self) -> Dict[str, Any]:
        """
        Returns:
            Dictionary with overall status, backend probe and metrics
        """
        backend = self.check_backend()

        return {
            'status': 'healthy' if backend['status'] == 'up' else 'degraded',
            'version': __version__,
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'components': {
                'flags_backend': backend
            },
            'metrics': metrics.get_summary()
        }
