"""
api/routes/users.py -- Account registration.

Routes:
  POST /api/users  -- register; returns a session token for the new account

Auth policy: public.

Duplicate emails are rejected with the same {"errors": [...]} envelope used
for field validation so the sign-up form renders both the same way.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError

from api.models import RegisterRequest, TokenResponse, json_body
from auth.avatar import gravatar_url
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService, hash_password
from core.errors import Conflict

logger = logging.getLogger("devconnector.api.users")

router = APIRouter()


@router.post("/users", response_model=TokenResponse)
def register(
    request: Request,
    body: RegisterRequest = Depends(json_body(RegisterRequest)),
) -> TokenResponse:
    """Create an account and sign the new user in.

    The email-exists check runs first so the common case gets a clean 400.
    The IntegrityError branch covers two concurrent sign-ups for one email.
    """
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.token_service

    if user_store.get_by_email(body.email) is not None:
        raise Conflict("User already exists", as_errors=True)

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=hash_password(body.password),
        avatar=gravatar_url(body.email),
    )
    try:
        user_id = user_store.create_user(user)
    except IntegrityError as exc:
        raise Conflict("User already exists", as_errors=True) from exc

    logger.info("Registered user %s", user_id)
    return TokenResponse(token=tokens.issue(user_id))
