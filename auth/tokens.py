"""
auth/tokens.py -- Session tokens and password hashing.

Security design decisions:
  JWT: python-jose with HS256. A token carries exactly one claim,
       {"user": {"id": <user id>}}, plus iat/exp. TokenService is built from
       Settings at startup (api.main.create_app) so the secret is injected,
       never read from a module global.

  Verification: TokenService.verify() raises TokenVerificationError with a
       reason (invalid_signature, expired, malformed). The reason is for
       server-side logs only -- the auth guard answers every failure with the
       same "Token is not valid" body.

  Passwords: bcrypt with cost factor 10. The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether an email is registered.

Layer rule: no imports from api/, profiles/, or posts/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from auth.models import TokenClaim

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore
    from core.config import Settings

logger = logging.getLogger("devconnector.auth")

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt ignores input past 72 bytes. The API caps passwords at 255
    characters, which keeps callers from sending unbounded payloads.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than later ones.
_DUMMY_HASH: str = hash_password("devconnector_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH
    - Wrong password: bcrypt runs against the real hash

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ---------------------------------------------------------------------------
# JWT issue / verify
# ---------------------------------------------------------------------------


class TokenVerificationError(Exception):
    """A presented token failed verification.

    reason is one of "invalid_signature", "expired", "malformed". All three
    are reported to clients identically.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TokenService:
    """Issue and verify signed, time-limited session tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        token = tokens.issue(user.id)
        claim = tokens.verify(token)   # TokenClaim(id=user.id)
    """

    def __init__(self, secret_key: str, expire_seconds: int = 360000) -> None:
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(settings.secret_key, settings.token_expire_seconds)

    def issue(self, subject: str) -> str:
        """Return a signed token whose only claim is the user id `subject`."""
        now = datetime.now(timezone.utc)
        payload = {
            "user": {"id": subject},
            "iat": now,
            "exp": now + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaim:
        """Check signature and expiry; return the embedded claim.

        Raises TokenVerificationError on any failure. jose reports a bad
        signature and a garbled token through the same JWTError type, so the
        message text is used to tell them apart for logging.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise TokenVerificationError("expired") from exc
        except JWTError as exc:
            reason = "invalid_signature" if "signature" in str(exc).lower() else "malformed"
            raise TokenVerificationError(reason) from exc

        user = payload.get("user")
        if not isinstance(user, dict) or not isinstance(user.get("id"), str):
            raise TokenVerificationError("malformed")
        return TokenClaim(id=user["id"])
