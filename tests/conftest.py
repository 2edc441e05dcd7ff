"""
Pytest configuration and shared fixtures.
"""

import logging
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from flag_dashboard.backend import FlagStore, create_backend_app
from flag_dashboard.observability import metrics, set_correlation_id
from flag_dashboard.services import FlagsApiClient

BACKEND_URL = 'http://flags.test/flags'


class FlaskAppAdapter(BaseAdapter):
    """
    Requests transport adapter that dispatches into a Flask test client.

    Lets the real FlagsApiClient talk to the development backend without
    opening sockets. Set ``fail_with`` to an exception to simulate an
    unreachable backend.
    """

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()
        self.fail_with = None
        self.calls = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.calls.append((request.method, request.url))

        if self.fail_with is not None:
            raise self.fail_with

        url = urlsplit(request.url)
        body = request.body
        if isinstance(body, str):
            body = body.encode('utf-8')

        headers = {k: v for k, v in request.headers.items() if k.lower() != 'content-length'}

        flask_response = self.client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            data=body,
            headers=headers
        )

        response = requests.Response()
        response.status_code = flask_response.status_code
        response._content = flask_response.get_data()
        response.headers = CaseInsensitiveDict(dict(flask_response.headers))
        response.url = request.url
        response.request = request
        response.encoding = 'utf-8'
        return response

    def close(self):
        pass


@pytest.fixture(autouse=True)
def reset_metrics():
    """Metrics and correlation IDs are process-global; start every test clean."""
    metrics.reset()
    metrics.enable()
    set_correlation_id(None)
    yield
    metrics.reset()


@pytest.fixture
def flag_store():
    """Backend store with two known flags, in a known order."""
    return FlagStore({'dark_mode': True, 'new_checkout': False})


@pytest.fixture
def backend_app(flag_store):
    app = create_backend_app(flag_store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def flags_adapter(backend_app):
    return FlaskAppAdapter(backend_app)


@pytest.fixture
def flags_client(flags_adapter):
    """FlagsApiClient wired to the in-memory backend."""
    session = requests.Session()
    session.mount('http://flags.test', flags_adapter)
    return FlagsApiClient(base_url=BACKEND_URL, timeout=5, max_retries=0, session=session, retry_wait=0)


@pytest.fixture
def restore_root_logging():
    """Put root logger handlers back after a test that calls setup_logging()."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
