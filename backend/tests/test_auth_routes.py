"""
test_auth_routes.py — login / me with a fake database session.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.auth_routes import create_access_token, pwd_context
from app.db import get_db
from app.main import app

PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="module")
def stored_user():
    return SimpleNamespace(
        id="u-admin",
        email="admin@acme.test",
        hashed_password=pwd_context.hash(PASSWORD),
        full_name="Acme Admin",
        role="admin",
        company_id="acme",
        is_active=True,
    )


@pytest.fixture
def client(stored_user):
    async def _fake_db():
        result = MagicMock()
        result.scalar_one_or_none.return_value = stored_user
        session = MagicMock()
        session.execute = AsyncMock(return_value=result)
        yield session

    app.dependency_overrides[get_db] = _fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_login_returns_token(client):
    resp = client.post("/api/auth/login", json={"email": "Admin@Acme.test ", "password": PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "admin"
    assert body["company_id"] == "acme"
    assert body["access_token"]


def test_login_wrong_password(client):
    resp = client.post("/api/auth/login", json={"email": "admin@acme.test", "password": "nope-nope"})
    assert resp.status_code == 401


def test_inactive_account_rejected(client, stored_user):
    stored_user.is_active = False
    try:
        resp = client.post("/api/auth/login", json={"email": "admin@acme.test", "password": PASSWORD})
    finally:
        stored_user.is_active = True
    assert resp.status_code == 403


def test_me_with_token(client):
    token = create_access_token({"sub": "u-admin", "role": "admin"})
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "admin@acme.test"


def test_me_with_bad_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
