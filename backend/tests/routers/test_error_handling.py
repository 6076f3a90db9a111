# backend/tests/routers/test_error_handling.py
"""
Tests for the shared error envelope and the health endpoints.

Every error body has the shape {"error", "message", "details"}, whether it
comes from a service exception, an HTTPException or request validation.
"""

from unittest.mock import patch

from conftest import get_auth_headers


class TestErrorEnvelope:

    def test_http_exception(self, client):
        response = client.get("/assets/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": "NotFoundError",
            "message": "Asset with id 999 not found",
            "details": None,
        }

    def test_service_not_found(self, client):
        body = client.get("/users/999/net-worth").json()

        assert body["error"] == "UserNotFoundError"
        assert body["message"] == "User 999 not found"
        assert body["details"] == {"resource_type": "User", "resource_id": 999}

    def test_request_validation(self, client):
        response = client.get("/statistics/assets/top", params={"limit": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        assert body["details"][0]["field"] == "query.limit"

    def test_unauthenticated(self, client):
        response = client.post("/portfolios/", json={"name": "Main"})

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_forbidden(self, client, db, sample_user):
        response = client.delete("/assets/1", headers=get_auth_headers(db, sample_user))

        assert response.status_code == 403
        assert response.json()["error"] == "ForbiddenError"

    def test_method_not_allowed(self, client):
        response = client.put("/health/live")

        assert response.status_code == 405


class TestHealth:

    def test_root(self, client):
        body = client.get("/").json()

        assert body["docs"] == "/docs"
        assert body["message"].startswith("Welcome to")

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_liveness(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_readiness(self, client):
        assert client.get("/health/ready").json() == {"status": "ready"}

    def test_unhealthy_database(self, client):
        unhealthy = {"status": "unhealthy", "error": "connection refused"}
        with patch("portfolio_tracker.main.check_database_health", return_value=unhealthy):
            health = client.get("/health")
            ready = client.get("/health/ready")

        assert health.status_code == 503
        assert health.json()["status"] == "unhealthy"
        assert ready.status_code == 503
        assert ready.json()["status"] == "not_ready"
