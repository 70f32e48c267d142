"""
Application Tests
Health endpoints and the global error format
"""

from purchase_portal.config.settings import settings


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["app_name"] == settings.APP_NAME


def test_root(client):
    assert client.get("/").json()["health"] == "/health"


def test_unknown_route_uses_error_format(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
