"""
api/routes/auth.py -- Login and current-user lookup.

Routes:
  GET  /api/auth  -- the caller's own user record (requires token)
  POST /api/auth  -- email/password login; returns a session token

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Unknown email and wrong password return the identical body so the response
  does not reveal whether an account exists.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import LoginRequest, TokenResponse, UserResponse, json_body
from auth.dependencies import get_current_user
from auth.models import TokenClaim
from auth.store import UserStore
from auth.tokens import TokenService, authenticate_user
from core.errors import NotFound, ValidationFailed

router = APIRouter()


@router.get("/auth", response_model=UserResponse)
def current_user(request: Request, claim: TokenClaim = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user's record without the password hash."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claim.id)
    if user is None:
        raise NotFound("User not found")
    return UserResponse.from_domain(user)


@router.post("/auth", response_model=TokenResponse)
def login(
    request: Request,
    response: Response,
    body: LoginRequest = Depends(json_body(LoginRequest)),
) -> TokenResponse:
    """Exchange email and password for a session token."""
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.token_service

    response.headers["Cache-Control"] = "no-store"
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        raise ValidationFailed([{"msg": "Invalid credentials"}])
    return TokenResponse(token=tokens.issue(user.id))
