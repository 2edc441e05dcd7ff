"""
Integration tests for the dashboard against the development backend.
"""

from unittest.mock import Mock

import pytest
import requests

from flag_dashboard.config import Settings
from flag_dashboard.observability import metrics
from flag_dashboard.web import create_app


class TestDashboardWorkflow:
    """Test end-to-end dashboard flows."""

    @pytest.fixture(autouse=True)
    def setup(self, flags_client, flags_adapter, flag_store):
        app = create_app(Settings(_env_file=None), client=flags_client)
        app.config['TESTING'] = True

        self.client = app.test_client()
        self.adapter = flags_adapter
        self.store = flag_store

    def _page(self, **query):
        response = self.client.get('/', query_string=query)
        return response, response.get_data(as_text=True)

    def test_index_lists_flags(self):
        response, html = self._page()

        assert response.status_code == 200
        assert 'Feature Flag Dashboard' in html
        assert 'data-flag="dark_mode"' in html
        assert 'data-flag="new_checkout"' in html
        assert html.index('data-flag="dark_mode"') < html.index('data-flag="new_checkout"')
        assert 'role="dialog"' not in html

    def test_create_flow(self):
        _, html = self._page(dialog='create')
        assert 'Create New Flag</h2>' in html
        assert '>Create</button>' in html

        response = self.client.post('/flags', data={'name': 'beta_reports', 'isEnabled': 'on'})

        assert response.status_code == 302
        assert self.store.get('beta_reports') is True

        _, html = self._page()
        assert 'data-flag="beta_reports"' in html
        assert 'role="dialog"' not in html

    def test_create_unchecked_is_disabled(self):
        self.client.post('/flags', data={'name': 'beta_reports'})

        assert self.store.get('beta_reports') is False

    def test_create_duplicate_keeps_dialog_open(self):
        response = self.client.post('/flags', data={'name': 'dark_mode'})
        html = response.get_data(as_text=True)

        assert response.status_code == 502
        assert 'role="dialog"' in html
        assert 'id="flag-name" type="text" name="name" value="dark_mode"' in html
        assert self.store.get('dark_mode') is True

    def test_edit_dialog(self):
        _, html = self._page(dialog='edit', flag='dark_mode')

        assert 'Edit Flag</h2>' in html
        assert 'Save Changes' in html
        assert 'readonly' in html
        assert 'value="dark_mode"' in html

    def test_edit_unknown_flag_leaves_dialog_closed(self):
        response, html = self._page(dialog='edit', flag='missing')

        assert response.status_code == 200
        assert 'role="dialog"' not in html

    def test_save_edit(self):
        response = self.client.post('/edit', data={'name': 'dark_mode'})

        assert response.status_code == 302
        assert self.store.get('dark_mode') is False

    def test_save_edit_of_deleted_flag(self):
        self.store.delete('dark_mode')

        response = self.client.post('/edit', data={'name': 'dark_mode', 'isEnabled': 'on'})

        assert response.status_code == 502
        assert 'Edit Flag</h2>' in response.get_data(as_text=True)

    def test_toggle(self):
        response = self.client.post('/toggle', data={'name': 'new_checkout', 'isEnabled': 'on'})

        assert response.status_code == 302
        assert self.store.get('new_checkout') is True

        self.client.post('/toggle', data={'name': 'new_checkout'})
        assert self.store.get('new_checkout') is False

    def test_toggle_unknown_flag_redirects(self):
        response = self.client.post('/toggle', data={'name': 'missing', 'isEnabled': 'on'})

        assert response.status_code == 302
        assert self.store.get('missing') is None

    def test_toggle_slashed_name(self):
        self.store.create('team/beta', False)

        response = self.client.post('/toggle', data={'name': 'team/beta', 'isEnabled': 'on'})

        assert response.status_code == 302
        assert self.store.get('team/beta') is True

    def test_toggle_leading_slash_does_not_change_sibling(self):
        self.store.create('x', False)
        self.store.create('/x', False)

        response = self.client.post('/toggle', data={'name': '/x', 'isEnabled': 'on'})

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/')
        assert self.store.get('x') is False

    def test_row_forms_post_name_as_field(self):
        self.store.create('/x', False)

        _, html = self._page()

        assert 'action="/toggle"' in html
        assert 'action="/delete"' in html
        assert '<input type="hidden" name="name" value="/x">' in html

    def test_mutation_without_name(self):
        response = self.client.post('/toggle', data={'isEnabled': 'on'})

        assert response.status_code == 400
        assert response.get_json()['error']['code'] == 'VALIDATION_ERROR'

    def test_delete(self):
        response = self.client.post('/delete', data={'name': 'dark_mode'})

        assert response.status_code == 302
        assert self.store.get('dark_mode') is None

        _, html = self._page()
        assert 'data-flag="dark_mode"' not in html

    def test_page_render_is_timed(self):
        self._page()
        self._page(dialog='create')

        timings = metrics.get_summary()['timings']['dashboard_render_ms']
        assert timings['dialog=closed']['count'] == 1
        assert timings['dialog=open']['count'] == 1

    def test_flag_count_gauges(self):
        self._page()

        gauges = metrics.get_summary()['gauges']
        assert gauges['flags_total']['service=dashboardservice'] == 2
        assert gauges['flags_enabled']['service=dashboardservice'] == 1

    def test_backend_down_renders_empty_table(self):
        self.adapter.fail_with = requests.ConnectionError("connection refused")

        response, html = self._page()

        assert response.status_code == 200
        assert 'data-flag=' not in html
        assert 'Create New Flag' in html

    def test_health_up(self):
        response = self.client.get('/health')
        body = response.get_json()

        assert response.status_code == 200
        assert body['status'] == 'healthy'
        assert body['components']['flags_backend']['status'] == 'up'

    def test_health_degraded(self):
        self.adapter.fail_with = requests.ConnectionError("connection refused")

        response = self.client.get('/health')

        assert response.status_code == 503
        assert response.get_json()['status'] == 'degraded'

    def test_correlation_id_echoed(self):
        response = self.client.get('/', headers={'X-Correlation-ID': 'req_dash_1'})

        assert response.headers['X-Correlation-ID'] == 'req_dash_1'

    def test_static_stylesheet(self):
        response = self.client.get('/static/dashboard.css')

        assert response.status_code == 200


class TestBackendClientLifecycle:
    """Test how the dashboard creates and releases backend clients."""

    def test_client_per_request(self, monkeypatch):
        created = []

        def build_client(**kwargs):
            client = Mock()
            client.list_flags.return_value = []
            created.append(client)
            return client

        monkeypatch.setattr('flag_dashboard.web.app.FlagsApiClient', build_client)
        app = create_app(Settings(_env_file=None))
        test_client = app.test_client()

        test_client.get('/')
        test_client.get('/')

        assert len(created) == 2
        for client in created:
            client.close.assert_called_once()

    def test_shared_client_is_left_open(self, flags_client, monkeypatch):
        close = Mock()
        monkeypatch.setattr(flags_client, 'close', close)
        app = create_app(Settings(_env_file=None), client=flags_client)

        app.test_client().get('/')

        close.assert_not_called()
