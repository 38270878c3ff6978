"""Endpoint tests for /users."""

from mpoly.store import Collection


class TestListUsers:
    """Tests for GET /users."""

    def test_admin_lists_users_without_password(self, client, admin_headers):
        response = client.get("/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [u["userId"] for u in body["data"]] == [
            "admin",
            "john.doe",
            "jane.smith",
            "bob.wilson",
        ]
        assert all("password" not in u for u in body["data"])
        assert "$2b$" not in response.text

    def test_non_admin_forbidden(self, client, john_headers):
        response = client.get("/users", headers=john_headers)
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Admin access required."}

    def test_without_token(self, client):
        assert client.get("/users").status_code == 401


class TestGetUser:
    """Tests for GET /users/{id}."""

    def test_self_lookup(self, client, john_headers):
        response = client.get("/users/usr-002", headers=john_headers)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "John Doe"
        assert "password" not in response.json()["data"]

    def test_non_admin_other_user_forbidden(self, client, john_headers):
        response = client.get("/users/usr-003", headers=john_headers)
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_admin_lookup(self, client, admin_headers):
        response = client.get("/users/usr-004", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "inactive"

    def test_unknown_user(self, client, admin_headers):
        response = client.get("/users/usr-999", headers=admin_headers)
        assert response.status_code == 404


class TestCreateUser:
    """Tests for POST /users."""

    def test_creates_user(self, client, admin_headers, login_as):
        response = client.post(
            "/users",
            headers=admin_headers,
            json={
                "userId": "mary.major",
                "password": "s3cret-pass",
                "name": "Mary Major",
                "email": "mary@mpoly.local",
                "role": "GeneralUser",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["userId"] == "mary.major"
        assert data["department"] == "General"
        assert data["status"] == "active"
        assert "password" not in data
        assert "$2b$" not in response.text

        login_as("mary.major", "s3cret-pass")

    def test_long_password_can_log_in(self, client, admin_headers, login_as):
        long_password = "x" * 80
        response = client.post(
            "/users",
            headers=admin_headers,
            json={
                "userId": "long.pass",
                "password": long_password,
                "name": "Long Pass",
                "email": "long@mpoly.local",
                "role": "GeneralUser",
            },
        )

        assert response.status_code == 201
        assert login_as("long.pass", long_password)

    def test_missing_email_is_400_and_file_unchanged(self, client, admin_headers, store):
        path = store.path_for(Collection.USERS)
        before = path.read_bytes()

        response = client.post(
            "/users",
            headers=admin_headers,
            json={
                "userId": "mary.major",
                "password": "s3cret-pass",
                "name": "Mary Major",
                "role": "GeneralUser",
            },
        )

        assert response.status_code == 400
        assert "required" in response.json()["message"]
        assert path.read_bytes() == before

    def test_duplicate_user_id_is_409(self, client, admin_headers, store):
        path = store.path_for(Collection.USERS)
        before = path.read_bytes()

        response = client.post(
            "/users",
            headers=admin_headers,
            json={
                "userId": "jane.smith",
                "password": "x",
                "name": "Another Jane",
                "email": "jane2@mpoly.local",
                "role": "Admin",
            },
        )

        assert response.status_code == 409
        assert path.read_bytes() == before

    def test_non_admin_forbidden(self, client, john_headers):
        response = client.post(
            "/users",
            headers=john_headers,
            json={
                "userId": "sneaky",
                "password": "x",
                "name": "Sneaky",
                "email": "s@mpoly.local",
                "role": "Admin",
            },
        )
        assert response.status_code == 403


class TestUpdateUser:
    """Tests for PUT /users/{id}."""

    def test_updates_allowed_fields_only(self, client, admin_headers):
        response = client.put(
            "/users/usr-002",
            headers=admin_headers,
            json={"name": "Johnny", "role": "Admin", "userId": "root", "id": "x"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Johnny"
        assert data["role"] == "Admin"
        assert data["userId"] == "john.doe"
        assert data["id"] == "usr-002"

    def test_long_password_rotation(self, client, admin_headers, login_as):
        long_password = "y" * 80
        response = client.put(
            "/users/usr-002", headers=admin_headers, json={"password": long_password}
        )

        assert response.status_code == 200
        assert login_as("john.doe", long_password)

    def test_deactivated_user_cannot_log_in(self, client, admin_headers):
        client.put("/users/usr-003", headers=admin_headers, json={"status": "inactive"})

        response = client.post(
            "/auth/login",
            json={"userId": "jane.smith", "password": "password123"},
        )
        assert response.status_code == 403

    def test_existing_token_survives_role_change(self, client, admin_headers, john_headers):
        client.put("/users/usr-002", headers=admin_headers, json={"role": "Admin"})

        # The token is the only source of identity, so the old role still applies.
        assert client.get("/users", headers=john_headers).status_code == 403

    def test_unknown_user(self, client, admin_headers):
        response = client.put("/users/usr-999", headers=admin_headers, json={"name": "x"})
        assert response.status_code == 404

    def test_non_admin_forbidden(self, client, john_headers):
        response = client.put("/users/usr-002", headers=john_headers, json={"role": "Admin"})
        assert response.status_code == 403


class TestDeleteUser:
    """Tests for DELETE /users/{id}."""

    def test_deletes_user(self, client, admin_headers):
        response = client.delete("/users/usr-004", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User deleted."}

        assert client.get("/users/usr-004", headers=admin_headers).status_code == 404

    def test_unknown_user(self, client, admin_headers):
        response = client.delete("/users/usr-999", headers=admin_headers)
        assert response.status_code == 404

    def test_non_admin_forbidden(self, client, john_headers):
        assert client.delete("/users/usr-003", headers=john_headers).status_code == 403
