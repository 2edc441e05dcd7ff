"""
Dashboard server entry point.

    flag-dashboard
    python -m flag_dashboard.web.server
"""

from .. import __version__
from ..config import settings
from ..observability import setup_logging, get_logger, metrics
from .app import create_app

logger = get_logger(__name__)


def print_startup_banner():
    """Print server startup information."""
    banner = f"""
{'='*70}
Feature Flag Dashboard v{__version__}
{'='*70}
✓ Dashboard: http://{settings.dashboard_host}:{settings.dashboard_port}/
✓ Health: http://{settings.dashboard_host}:{settings.dashboard_port}/health

Flags backend:
  URL: {settings.flags_api.base_url}
  Timeout: {settings.flags_api.timeout}s
  Read retries: {settings.flags_api.max_retries}

Configuration:
  Environment: {'Development' if settings.dashboard_debug else 'Production'}
  Log Level: {settings.observability.log_level}
  Log Format: {settings.observability.log_format}
  Metrics Enabled: {settings.enable_metrics and settings.observability.metrics_enabled}

{'='*70}
"""
    print(banner)


def main():
    setup_logging(
        log_level=settings.observability.log_level,
        log_format=settings.observability.log_format,
        log_dir=settings.observability.log_dir
    )

    if not settings.observability.metrics_enabled:
        metrics.disable()

    app = create_app(settings)

    print_startup_banner()
    logger.info("Starting dashboard server", extra={'flags_api_url': settings.flags_api.base_url})

    app.run(
        host=settings.dashboard_host,
        port=settings.dashboard_port,
        debug=settings.dashboard_debug
    )


if __name__ == '__main__':
    main()
