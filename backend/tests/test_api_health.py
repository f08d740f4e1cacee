"""Tests for health check endpoint."""


def test_health_check(client):
    """Health endpoint should report the storage backend in use."""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "app_name" in data
    assert data["backend"] == "local"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_currencies(client):
    """Supported currencies are exposed for the transaction form."""
    response = client.get("/api/v1/currencies")
    assert response.status_code == 200
    data = response.json()
    assert data["default"] == "USD"
    assert data["supported"] == ["USD", "EUR", "GBP", "NGN", "AUD"]
