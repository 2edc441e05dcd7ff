"""
Flask application factory for the dashboard.
"""

from typing import Optional

from flask import Flask, g

from ..api import setup_middleware
from ..config import Settings, settings
from ..services import FlagsApiClient
from .routes import bp


def create_app(app_settings: Optional[Settings] = None, client: Optional[FlagsApiClient] = None) -> Flask:
    """
    Build the dashboard application.

    Each request gets its own FlagsApiClient (and ``requests`` session),
    closed when the request ends, since the development server handles
    requests on several threads. A ``client`` passed in is shared by all
    requests instead and left open; tests use this to wire in a fake
    transport.

    Args:
        app_settings: Settings to use (module-level settings by default)
        client: Shared backend client; per-request clients are built from
            ``app_settings.flags_api`` when omitted

    Returns:
        Flask application

    Example:
        app = create_app()
        app.run(port=5001)
    """
    app_settings = app_settings or settings

    app = Flask(__name__)
    app.config['DASHBOARD_SETTINGS'] = app_settings

    if client is not None:
        app.extensions["flags_client_factory"] = lambda: client
    else:
        def client_factory() -> FlagsApiClient:
            return FlagsApiClient(
                base_url=app_settings.flags_api.base_url,
                timeout=app_settings.flags_api.timeout,
                max_retries=app_settings.flags_api.max_retries
            )

        app.extensions["flags_client_factory"] = client_factory

        @app.teardown_appcontext
        def close_flags_client(exc=None):
            flags_client = g.pop('flags_client', None)
            if flags_client is not None:
                flags_client.close()

    setup_middleware(app, enable_metrics=app_settings.enable_metrics)
    app.register_blueprint(bp)

    return app
