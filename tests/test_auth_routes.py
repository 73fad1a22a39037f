"""
tests/test_auth_routes.py -- GET/POST /api/auth.

Covers:
  - Login with correct credentials returns a token for the same user
  - Wrong password and unknown email return the identical 400 body
  - Login validation messages
  - Surrounding whitespace in a password is significant
  - GET /api/auth after the account is deleted -> 404
"""

from __future__ import annotations

from conftest import auth, register

_INVALID = {"errors": [{"msg": "Invalid credentials"}]}


def test_login_success(client):
    _token, user_id = register(client, email="ada@example.com", password="secret123")
    resp = client.post("/api/auth", json={"email": "ada@example.com", "password": "secret123"})
    assert resp.status_code == 200, resp.text
    assert resp.headers["Cache-Control"] == "no-store"

    me = client.get("/api/auth", headers=auth(resp.json()["token"]))
    assert me.json()["_id"] == user_id


def test_wrong_password(client):
    register(client, email="ada@example.com", password="secret123")
    resp = client.post("/api/auth", json={"email": "ada@example.com", "password": "wrong-password"})
    assert resp.status_code == 400
    assert resp.json() == _INVALID


def test_unknown_email_indistinguishable_from_wrong_password(client):
    register(client, email="ada@example.com", password="secret123")
    resp = client.post("/api/auth", json={"email": "nobody@example.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.json() == _INVALID


def test_login_validation(client):
    resp = client.post("/api/auth", json={"email": "bad", "password": ""})
    assert resp.status_code == 400
    assert [e["msg"] for e in resp.json()["errors"]] == ["Please include a valid email", "Password is required"]


def test_current_user_gone(client):
    token, _user_id = register(client)
    assert client.delete("/api/profile", headers=auth(token)).status_code == 200
    resp = client.get("/api/auth", headers=auth(token))
    assert resp.status_code == 404
    assert resp.json() == {"msg": "User not found"}


def test_password_whitespace_not_trimmed(client):
    register(client, email="ada@example.com", password="  secret  ")
    trimmed = client.post("/api/auth", json={"email": "ada@example.com", "password": "secret"})
    assert trimmed.status_code == 400
    assert trimmed.json() == _INVALID

    exact = client.post("/api/auth", json={"email": "ada@example.com", "password": "  secret  "})
    assert exact.status_code == 200


def test_login_without_body(client):
    resp = client.post("/api/auth")
    assert resp.status_code == 400
    assert [e["msg"] for e in resp.json()["errors"]] == ["Please include a valid email", "Password is required"]
