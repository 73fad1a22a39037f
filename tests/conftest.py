"""
tests/conftest.py -- Shared test fixtures for DevConnector integration tests.

This module provides:
  - make_settings(): Settings pointing at a fresh named shared-memory SQLite DB
  - client: TestClient over create_app(settings), lifespan included
  - register(): helper that signs a user up and returns (token, user_id)

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool, and the three
stores each open their own engine. Plain :memory: DBs are per-connection and
would present a blank schema to each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process. Each test gets a unique name so
no state leaks between tests.

The DEBUG env var must be set before any api import: api.main builds a
module-level app from get_settings(), which would otherwise refuse to start
without SECRET_KEY.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator

# CRITICAL: Set DEBUG before any api/core import so the module-level app in
# api.main can auto-generate SECRET_KEY instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings

TEST_SECRET = "test-secret-key-0123456789abcdef0123456789abcdef"


def make_settings(**overrides) -> Settings:
    """Return Settings bound to a brand-new shared-memory database."""
    db_name = f"test_devconnector_{uuid.uuid4().hex}"
    values = {
        "secret_key": TEST_SECRET,
        "database_url": f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true",
        "github_client_id": "",
        "github_client_secret": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """TestClient over a fresh app. Entering the context runs the lifespan,
    which opens the stores against the test database."""
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


def register(client: TestClient, name: str = "Ada Lovelace", email: str = "ada@example.com", password: str = "secret123"):
    """Register a user through the API. Returns (token, user_id)."""
    resp = client.post("/api/users", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.json()["token"]
    me = client.get("/api/auth", headers={"x-auth-token": token})
    assert me.status_code == 200, me.text
    return token, me.json()["_id"]


def auth(token: str) -> dict[str, str]:
    return {"x-auth-token": token}
