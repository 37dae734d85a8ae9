"""Fixtures for the HTTP API tests."""

import pytest
from fastapi.testclient import TestClient

from app.application.services.auth_service import hash_password
from app.domain.models.user import ROLE_ADMIN, ROLE_CLIENT, User
from app.infrastructure.database import get_db
from app.main import app

ADMIN_EMAIL = "admin@test.com"
USER_EMAIL = "user@test.com"
PASSWORD = "secret123"


@pytest.fixture
def api(db) -> TestClient:
    """TestClient whose requests share the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add_user(db, email: str, role: str) -> User:
    user = User(
        first_name="Test",
        last_name=role,
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
    )
    db.add(user)
    db.commit()
    return user


def _token(api: TestClient, email: str) -> str:
    response = api.post("/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(api, db) -> dict:
    _add_user(db, ADMIN_EMAIL, ROLE_ADMIN)
    return {"Authorization": f"Bearer {_token(api, ADMIN_EMAIL)}"}


@pytest.fixture
def user_headers(api, db) -> dict:
    _add_user(db, USER_EMAIL, ROLE_CLIENT)
    return {"Authorization": f"Bearer {_token(api, USER_EMAIL)}"}
