"""Endpoint tests for /auth/login, /auth/me and /health."""

import jwt

from mpoly.seed import DEMO_PASSWORD

JWT_SECRET = "test-secret-key-for-jwt-unit-tests"


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------

class TestAuthLogin:
    """Tests for POST /auth/login."""

    def test_login_admin(self, client):
        response = client.post(
            "/auth/login",
            json={"userId": "admin", "password": "password123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        user = body["user"]
        assert user.pop("exp") - user.pop("iat") == 8 * 3600
        assert user == {
            "id": "usr-001",
            "userId": "admin",
            "name": "System Administrator",
            "email": "admin@mpoly.local",
            "role": "Admin",
            "department": "IT",
        }

    def test_token_carries_claims(self, client):
        response = client.post(
            "/auth/login",
            json={"userId": "john.doe", "password": DEMO_PASSWORD},
        )
        payload = jwt.decode(response.json()["token"], JWT_SECRET, algorithms=["HS256"])
        assert payload["id"] == "usr-002"
        assert payload["role"] == "GeneralUser"
        assert "password" not in payload

    def test_login_wrong_password(self, client):
        response = client.post(
            "/auth/login",
            json={"userId": "admin", "password": "wrong"},
        )
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials."}

    def test_login_unknown_user_same_message(self, client):
        response = client.post(
            "/auth/login",
            json={"userId": "ghost", "password": "whatever"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials."

    def test_login_inactive_account(self, client):
        response = client.post(
            "/auth/login",
            json={"userId": "bob.wilson", "password": DEMO_PASSWORD},
        )
        assert response.status_code == 403
        assert response.json()["success"] is False
        assert "inactive" in response.json()["message"].lower()

    def test_login_missing_password(self, client):
        response = client.post("/auth/login", json={"userId": "admin"})
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "userId and password are required.",
        }

    def test_login_non_json_body(self, client):
        response = client.post(
            "/auth/login",
            content="userId=admin",
            headers={"Content-Type": "text/plain"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------

class TestAuthMe:
    """Tests for GET /auth/me."""

    def test_me_returns_claims(self, client, john_headers):
        response = client.get("/auth/me", headers=john_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["userId"] == "john.doe"
        assert body["user"]["exp"] - body["user"]["iat"] == 8 * 3600

    def test_me_without_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Authorisation token missing.",
        }

    def test_me_with_non_bearer_scheme(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Basic YWRtaW46cHc="})
        assert response.status_code == 401

    def test_me_with_bad_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_with_expired_token(self, client, john_headers, clock):
        clock.advance(hours=8)
        response = client.get("/auth/me", headers=john_headers)
        assert response.status_code == 401
        assert "expired" in response.json()["message"].lower()


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

class TestMisc:
    """Health check, unknown routes and correlation ids."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"]

    def test_unknown_endpoint(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Endpoint not found."}

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-Id": "abc-123"})
        assert response.headers["X-Correlation-Id"] == "abc-123"
