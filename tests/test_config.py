"""Unit tests for core/config.py -- SECRET_KEY policy and defaults."""

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_explicit_secret_accepted():
    s = Settings(secret_key="k" * 32, debug=False)
    assert s.secret_key == "k" * 32


def test_defaults():
    s = Settings(secret_key="k" * 32)
    assert s.token_expire_seconds == 360000
    assert s.port == 5000


def test_missing_secret_in_production_refuses_to_start(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(secret_key="", debug=False, _env_file=None)


def test_missing_secret_in_debug_generates_one():
    s = Settings(secret_key="", debug=True, _env_file=None)
    assert len(s.secret_key) >= 32


def test_short_secret_rejected():
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(secret_key="short", debug=True)


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Settings(secret_key="k" * 32).port == 8080
