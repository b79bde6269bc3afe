"""
Tests for API health endpoints.
"""


def test_root(client):
    """Test root endpoint returns expected response."""
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "F1 Dashboard API"
    assert data["status"] == "running"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["api"] == "healthy"
    assert "upstream" in data
