"""
Dashboard views.

Every page load builds a fresh DashboardService, fetches the flag list and
renders it. Mutations post a form, call the backend and redirect back to
the page, so the list is refetched after every change. The dialog state
travels in the query string (``?dialog=create`` / ``?dialog=edit&flag=...``).

Flag names are posted as the ``name`` form field, never as a path segment:
names may contain slashes, which URL routing would merge or split.
"""

from flask import Blueprint, current_app, g, redirect, render_template, request, url_for

from ..api import ValidationError, make_success_response
from ..observability import get_logger, metrics
from ..services import DashboardService, FeatureFlag, FlagsApiClient, HealthService

logger = get_logger(__name__)

bp = Blueprint("dashboard", __name__)

TRUE_VALUES = ('on', 'true', '1', 'yes')


def _client() -> FlagsApiClient:
    """Backend client for the current request."""
    if 'flags_client' not in g:
        g.flags_client = current_app.extensions["flags_client_factory"]()
    return g.flags_client


def _dashboard() -> DashboardService:
    # The redirect after each mutation does the refetch
    return DashboardService(_client(), auto_refresh=False)


def _form_enabled() -> bool:
    return request.form.get('isEnabled', '').lower() in TRUE_VALUES


def _form_flag_name() -> str:
    flag_name = request.form.get('name', '')
    if not flag_name:
        raise ValidationError("name form field is required", details={"field": "name"})
    return flag_name


def _render(dashboard: DashboardService, status_code: int = 200):
    with metrics.timer('dashboard_render_ms', tags={'dialog': 'open' if dashboard.dialog_open else 'closed'}):
        html = render_template("dashboard.html", dashboard=dashboard)
    return html, status_code


def _back_to_index():
    return redirect(url_for('dashboard.index'))


@bp.get("/")
def index():
    dashboard = _dashboard()
    dashboard.fetch_flags()

    dialog = request.args.get('dialog')
    if dialog == 'create':
        dashboard.open_dialog()
    elif dialog == 'edit':
        flag_name = request.args.get('flag', '')
        flag = dashboard.find_flag(flag_name)
        if flag is None:
            logger.warning(
                f"Cannot edit unknown flag '{flag_name}'",
                extra={'flag_name': flag_name}
            )
        else:
            dashboard.open_dialog(flag)

    return _render(dashboard)


@bp.post("/flags")
def create_flag():
    """Submit the create dialog. On failure the dialog is shown again with its values."""
    dashboard = _dashboard()
    dashboard.open_dialog()
    dashboard.set_dialog_name(request.form.get('name', ''))
    dashboard.set_dialog_enabled(_form_enabled())

    if dashboard.submit_dialog():
        return _back_to_index()

    dashboard.fetch_flags()
    return _render(dashboard, 502)


@bp.post("/edit")
def save_flag():
    """Submit the edit dialog."""
    dashboard = _dashboard()
    dashboard.open_dialog(FeatureFlag(name=_form_flag_name()))
    dashboard.set_dialog_enabled(_form_enabled())

    if dashboard.submit_dialog():
        return _back_to_index()

    dashboard.fetch_flags()
    return _render(dashboard, 502)


@bp.post("/toggle")
def toggle_flag():
    """Row switch. Failures are logged by the service and the page reloads as is."""
    _dashboard().update_flag(_form_flag_name(), _form_enabled())
    return _back_to_index()


@bp.post("/delete")
def delete_flag():
    _dashboard().delete_flag(_form_flag_name())
    return _back_to_index()


@bp.get("/health")
def health():
    system_health = HealthService(_client()).get_system_health()
    status_code = 200 if system_health['status'] == 'healthy' else 503
    return make_success_response(system_health, status_code=status_code)
