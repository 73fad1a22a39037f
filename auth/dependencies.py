"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The auth guard is a two-step gate:
  1. Extract: read the x-auth-token header. Missing -> 401
     {"msg": "No token, authorization denied"}.
  2. Verify: TokenService.verify(). Any failure -> 401
     {"msg": "Token is not valid"}. Success -> the TokenClaim is stored on
     request.state.user and returned to the handler.

The guard never touches a store. Handlers that need the full User record
look it up themselves.

Layer rule: no imports from api/, profiles/, or posts/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import TokenClaim
from auth.tokens import TokenService, TokenVerificationError
from core.errors import Unauthenticated

logger = logging.getLogger("devconnector.auth")

TOKEN_HEADER = "x-auth-token"


def get_current_user(request: Request) -> TokenClaim:
    """Require a valid session token. Raises Unauthenticated (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: TokenClaim = Depends(get_current_user)): ...
    """
    token = request.headers.get(TOKEN_HEADER)
    if not token:
        raise Unauthenticated("No token, authorization denied")

    tokens: TokenService = request.app.state.token_service
    try:
        claim = tokens.verify(token)
    except TokenVerificationError as exc:
        logger.debug("Rejected token on %s %s: %s", request.method, request.url.path, exc.reason)
        raise Unauthenticated("Token is not valid") from exc

    request.state.user = claim
    return claim
