"""
Pytest configuration and shared fixtures.

Provides a test application, a test client, and a mocked urllib3
transport so no test ever reaches the real REST collection.  The
``testing`` configuration points the client at a placeholder URL.
"""

import json
from unittest.mock import MagicMock

import pytest

from equipos import create_app
from equipos.extensions import panels
from equipos.services.equipos_client import EquiposApiClient

# Matches TestingConfig.EQUIPOS_API_BASE_URL.
BASE_URL = "https://equipos.test/ords/equipos/"


@pytest.fixture(scope="session")
def app():
    """
    Create a Flask application configured for testing.

    The app is created once per test session with an application
    context pushed for the whole session.
    """
    app = create_app("testing")

    with app.app_context():
        yield app


@pytest.fixture
def fake_response():
    """
    Build objects shaped like ``urllib3.BaseHTTPResponse``.

    Usage in tests::

        def test_list(http, fake_response):
            http.request.return_value = fake_response(200, {"items": []})

    ``body`` may be a dict/list (JSON-encoded), raw bytes, or None.
    """

    def _build(status: int = 200, body=None):
        response = MagicMock(name=f"response_{status}")
        response.status = status
        if body is None:
            response.data = b""
        elif isinstance(body, bytes):
            response.data = body
        else:
            response.data = json.dumps(body).encode("utf-8")
        return response

    return _build


@pytest.fixture
def http():
    """A mocked ``urllib3.PoolManager``; configure ``http.request``."""
    return MagicMock(name="PoolManager")


@pytest.fixture
def api_client(http):
    """An ``EquiposApiClient`` that sends through the mocked transport."""
    return EquiposApiClient(base_url=BASE_URL, http=http)


@pytest.fixture
def fake_api(api_client):
    """
    Route every client the app builds through the mocked transport.

    Also empties the panel registry so each test starts with no
    mounted panels.
    """
    original_factory = panels.client_factory
    panels.client_factory = lambda: api_client
    panels.clear()

    yield api_client

    panels.client_factory = original_factory
    panels.clear()


@pytest.fixture
def client(app, fake_api):  # pylint: disable=redefined-outer-name,unused-argument
    """
    Provide a Flask test client for making HTTP requests.

    Cookies persist for the life of the client, so every request in a
    test shares one session and therefore one panel.

    Usage in tests::

        def test_index(client):
            response = client.get("/equipos/")
            assert response.status_code == 200
    """
    with app.test_client() as test_client:
        yield test_client
