import pytest
from fastapi.testclient import TestClient

from jobportal.config import Settings
from jobportal.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.sqlite'}",
        jwt_secret="test-secret",
        upload_dir=tmp_path / "uploads",
        environment="test",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name: str, email: str, role: str = "user", password: str = "password123") -> dict:
    r = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "role": role,
    })
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def user(client):
    """Registered regular user: {"token", "user", "headers"}."""
    data = register(client, "Alice", "alice@example.com")
    data["headers"] = auth_header(data["token"])
    return data


@pytest.fixture
def admin(client):
    data = register(client, "Bob Admin", "bob@example.com", role="admin")
    data["headers"] = auth_header(data["token"])
    return data


JOB_PAYLOAD = {
    "title": "Senior React Developer",
    "company": "Acme Corp",
    "location": "Remote",
    "type": "full-time",
    "description": "Build web applications",
}


def create_job(client, headers: dict, **overrides) -> dict:
    r = client.post("/api/jobs", json={**JOB_PAYLOAD, **overrides}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def job(client, admin):
    return create_job(client, admin["headers"])
