import time

import jwt
import pytest
from fastapi.testclient import TestClient

from conftest import auth_header, register
from jobportal.main import create_app


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "OK"
        assert "timestamp" in data

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["status"] == "Server is running"


class TestRegister:
    def test_register_returns_token_and_user(self, client):
        data = register(client, "Alice", "alice@example.com")
        assert data["token"]
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["role"] == "user"
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    def test_register_defaults_to_user_role(self, client):
        r = client.post("/api/auth/register", json={
            "name": "Carol",
            "email": "carol@example.com",
            "password": "password123",
        })
        assert r.status_code == 201
        assert r.json()["user"]["role"] == "user"

    def test_register_admin(self, client):
        data = register(client, "Bob", "bob@example.com", role="admin")
        assert data["user"]["role"] == "admin"

    def test_register_rejects_unknown_role(self, client):
        r = client.post("/api/auth/register", json={
            "name": "Eve",
            "email": "eve@example.com",
            "password": "password123",
            "role": "superuser",
        })
        assert r.status_code == 400
        assert "message" in r.json()

    def test_register_rejects_duplicate_email(self, client):
        register(client, "Alice", "alice@example.com")
        r = client.post("/api/auth/register", json={
            "name": "Alice Again",
            "email": "Alice@Example.com",
            "password": "password123",
        })
        assert r.status_code == 400
        assert r.json()["message"] == "User already exists"

    def test_register_requires_fields(self, client):
        r = client.post("/api/auth/register", json={"email": "x@example.com"})
        assert r.status_code == 400
        assert r.json()["message"].startswith("Validation error")


class TestLogin:
    def test_login_success(self, client):
        register(client, "Alice", "alice@example.com", password="secret-pass")
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret-pass"})
        assert r.status_code == 200
        data = r.json()
        assert data["message"] == "Login successful"
        assert data["user"]["name"] == "Alice"

    def test_login_wrong_password(self, client):
        register(client, "Alice", "alice@example.com", password="secret-pass")
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid credentials"

    def test_login_unknown_email(self, client):
        r = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"})
        assert r.status_code == 400


class TestProfile:
    def test_get_profile(self, client, user):
        r = client.get("/api/auth/profile", headers=user["headers"])
        assert r.status_code == 200
        data = r.json()
        assert data["email"] == "alice@example.com"
        assert data["profile"]["skills"] == []
        assert "passwordHash" not in data

    def test_profile_requires_token(self, client):
        r = client.get("/api/auth/profile")
        assert r.status_code == 401
        assert r.json()["message"] == "Access denied. No token provided."

    def test_profile_rejects_garbage_token(self, client):
        r = client.get("/api/auth/profile", headers=auth_header("not-a-jwt"))
        assert r.status_code == 401

    def test_profile_rejects_wrong_scheme(self, client, user):
        r = client.get("/api/auth/profile", headers={"Authorization": f"Basic {user['token']}"})
        assert r.status_code == 401

    def test_profile_rejects_expired_token(self, client, user, settings):
        now = int(time.time())
        token = jwt.encode(
            {"sub": user["user"]["id"], "iat": now - 100, "exp": now - 10},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        r = client.get("/api/auth/profile", headers=auth_header(token))
        assert r.status_code == 401

    def test_profile_rejects_token_signed_with_other_secret(self, client, user):
        now = int(time.time())
        token = jwt.encode({"sub": user["user"]["id"], "exp": now + 60}, "other-secret", algorithm="HS256")
        r = client.get("/api/auth/profile", headers=auth_header(token))
        assert r.status_code == 401

    def test_update_profile(self, client, user):
        r = client.put("/api/auth/profile", json={
            "name": "Alice Smith",
            "profile": {"phone": "555-1234", "skills": "python, react"},
        }, headers=user["headers"])
        assert r.status_code == 200
        data = r.json()
        assert data["message"] == "Profile updated successfully"
        assert data["user"]["name"] == "Alice Smith"
        assert data["user"]["profile"]["phone"] == "555-1234"
        assert data["user"]["profile"]["skills"] == ["python", "react"]

    def test_update_profile_ignores_role_and_password(self, client, user):
        r = client.put("/api/auth/profile", json={
            "role": "admin",
            "password": "hijacked",
        }, headers=user["headers"])
        assert r.status_code == 200
        assert r.json()["user"]["role"] == "user"

        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "hijacked"})
        assert r.status_code == 400
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
        assert r.status_code == 200

    def test_update_profile_rejects_taken_email(self, client, user):
        register(client, "Dan", "dan@example.com")
        r = client.put("/api/auth/profile", json={"email": "dan@example.com"}, headers=user["headers"])
        assert r.status_code == 400


class TestAdminRegistrationSwitch:
    def test_admin_signup_can_be_disabled(self, settings):
        from fastapi.testclient import TestClient

        from jobportal.main import create_app

        locked = settings.model_copy(update={"allow_admin_registration": False})
        with TestClient(create_app(locked)) as c:
            r = c.post("/api/auth/register", json={
                "name": "Mallory",
                "email": "mallory@example.com",
                "password": "password123",
                "role": "admin",
            })
            assert r.status_code == 403


class TestUnhandledErrors:
    def _client(self, settings, environment):
        app = create_app(settings.model_copy(update={"environment": environment}))

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        return TestClient(app, raise_server_exceptions=False)

    def test_production_hides_details(self, settings):
        with self._client(settings, "production") as client:
            r = client.get("/boom")
        assert r.status_code == 500
        assert r.json() == {"message": "Internal Server Error"}

    @pytest.mark.parametrize("environment", ["development", "test"])
    def test_non_production_includes_traceback(self, settings, environment):
        with self._client(settings, environment) as client:
            r = client.get("/boom")
        assert r.status_code == 500
        data = r.json()
        assert data["message"] == "kaboom"
        assert "RuntimeError" in data["error"]
