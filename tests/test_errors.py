"""
tests/test_errors.py -- Server faults surface as a bare 500.

Covers:
  - A store failure (SQLAlchemyError) -> 500 text "Server error"
  - Any other unexpected exception -> the same 500, no detail leaked
"""

from __future__ import annotations

from unittest.mock import patch

from conftest import auth, register
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from api.main import create_app


def test_store_failure_returns_server_error(client):
    token, _ = register(client)
    failure = OperationalError("SELECT * FROM posts", {}, Exception("database is locked"))
    with patch.object(client.app.state.post_store, "list_posts", side_effect=failure):
        resp = client.get("/api/posts", headers=auth(token))
    assert resp.status_code == 500
    assert resp.text == "Server error"
    assert "locked" not in resp.text


def test_unexpected_exception_returns_server_error(settings):
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        token, _ = register(c)
        with patch.object(app.state.post_store, "list_posts", side_effect=RuntimeError("secret detail")):
            resp = c.get("/api/posts", headers=auth(token))
    assert resp.status_code == 500
    assert resp.text == "Server error"
