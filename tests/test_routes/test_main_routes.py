"""
Smoke tests for the main blueprint routes.

These verify that the application starts up correctly and the root
redirect and health check endpoints respond.
"""

import urllib3


class TestHome:
    """Tests for the root URL."""

    def test_redirects_to_equipos(self, client):
        """The root URL should send visitors to the equipment page."""
        response = client.get("/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/equipos/")


class TestHealthCheck:
    """Tests for the health check endpoint."""

    def test_health_check_returns_200(self, client, http, fake_response):
        """A reachable collection reports healthy with its record count."""
        http.request.return_value = fake_response(200, {"items": [{"id": 1}]})

        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json() == {
            "status": "healthy",
            "api": "reachable",
            "records": 1,
        }

    def test_health_check_returns_503(self, client, http):
        """An unreachable collection reports unhealthy."""
        http.request.side_effect = urllib3.exceptions.ProtocolError("refused")

        response = client.get("/health")

        assert response.status_code == 503
        assert response.get_json()["status"] == "unhealthy"


class TestErrorPages:
    """Tests for the custom error handlers."""

    def test_unknown_url_renders_404_page(self, client):
        response = client.get("/does-not-exist")
        assert response.status_code == 404
        assert "La página solicitada no existe" in response.get_data(as_text=True)
