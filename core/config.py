"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for DevConnector happen here. No module should
call os.getenv() or os.environ.get() directly -- build a Settings instance (or
call get_settings()) and pass it to create_app().

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  Explicit injection: api.main.create_app(settings) receives the Settings
      object and hands the secret to TokenService and the database URL to the
      stores. Nothing reads the secret from a module-level global.

  @model_validator(mode="after"): dev mode (DEBUG=true) auto-generates a
      SECRET_KEY with a warning; production mode refuses to start without one.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
profiles/, or posts/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("devconnector.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'devconnector.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. Field names map to uppercased
    environment variables (secret_key -> SECRET_KEY, port -> PORT).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    secret_key: str = ""

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 5000
    cors_origins: list[str] = ["http://localhost:3000"]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Session tokens live 360000 seconds (100 hours). There is no refresh flow.
    token_expire_seconds: int = 360000

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # GitHub (optional -- empty string means unauthenticated lookups)
    # ------------------------------------------------------------------

    github_client_id: str = ""
    github_client_secret: str = ""

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive a restart.

        Production mode: refuse to start if SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not persist across restarts.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: construct Settings(...) directly and pass it to create_app(),
    or call get_settings.cache_clear() after changing the environment.
    """
    return Settings()
