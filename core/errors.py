"""
core/errors.py -- Error taxonomy shared by the auth guard and route handlers.

Every client-visible failure is an ApiError subclass. api/main.py registers
one exception handler that renders them:

  body="msg"     -> {"msg": "<message>"}
  body="errors"  -> {"errors": [{"msg": "<message>", ...}, ...]}

Status codes intentionally mirror the long-standing API contract, including
its quirks: Forbidden is 401 (not 403) and NotFound is 400 on some routes and
404 on others. Route handlers pass the status explicitly where it differs.

Unexpected failures (store errors, bugs) are NOT ApiErrors. They fall through
to the generic handlers in api/main.py and become a plain-text 500.
"""

from typing import Any, Optional


class ApiError(Exception):
    """Base class for errors that map to a structured 4xx response."""

    status_code: int = 400
    body: str = "msg"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def content(self) -> dict[str, Any]:
        if self.body == "errors":
            return {"errors": [{"msg": self.message}]}
        return {"msg": self.message}


class ValidationFailed(ApiError):
    """One or more request fields failed validation (400, errors array)."""

    body = "errors"

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__(errors[0]["msg"] if errors else "Invalid request")
        self.errors = errors

    def content(self) -> dict[str, Any]:
        return {"errors": self.errors}


class Unauthenticated(ApiError):
    """No token, or a token that failed verification (401)."""

    status_code = 401


class Forbidden(ApiError):
    """Acting identity does not own the resource (401, not 403)."""

    status_code = 401

    def __init__(self, message: str = "User not authorized") -> None:
        super().__init__(message)


class NotFound(ApiError):
    """Primary lookup found no record. 404 by default; some routes use 400."""

    status_code = 404


class Conflict(ApiError):
    """Duplicate registration or a like/unlike guard tripped (400)."""

    status_code = 400

    def __init__(self, message: str, as_errors: bool = False) -> None:
        super().__init__(message)
        if as_errors:
            self.body = "errors"
