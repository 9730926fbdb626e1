import os
import tempfile
import uuid

import pytest

# Must be set before app.config is imported anywhere.
_DB_DIR = tempfile.mkdtemp(prefix="skillshare-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("JWT_SECRET", "skillshare-test-secret-0123456789abcdef")

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Register a fresh user and return ``(user_id, auth headers)``."""

    def _make(name: str = "Student", **extra):
        email = f"{name.lower().replace(' ', '.')}.{uuid.uuid4().hex[:8]}@univ.ac.jp"
        response = client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": "secret123", **extra},
        )
        assert response.status_code == 200, response.text
        headers = {"Authorization": f"Bearer {response.json()['token']}"}
        me = client.get("/api/users/me", headers=headers)
        assert me.status_code == 200
        return me.json()["id"], headers

    return _make


@pytest.fixture
def make_skill(client, make_user):
    """Create a uniquely named skill and return its id."""
    _, headers = make_user("Skill Admin")

    def _make(name: str = "Skill", category: str = "Testing"):
        response = client.post(
            "/api/skills",
            json={"name": f"{name} {uuid.uuid4().hex[:6]}", "category": category},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make
