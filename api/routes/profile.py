"""
api/routes/profile.py -- Developer profile routes.

Routes (in registration order to avoid FastAPI path capture conflicts):
  GET    /profile/me                    -- caller's profile, user populated (token)
  POST   /profile                       -- create or update caller's profile (token)
  GET    /profile                       -- all profiles, users populated (public)
  GET    /profile/user/{user_id}        -- one user's profile (public)
  DELETE /profile                       -- delete caller's posts, profile and account (token)
  PUT    /profile/experience            -- add experience entry (token)
  DELETE /profile/experience/{exp_id}   -- remove experience entry (token)
  PUT    /profile/education             -- add education entry (token)
  DELETE /profile/education/{edu_id}    -- remove education entry (token)
  GET    /profile/github/{username}     -- latest GitHub repos (public)

"Not found" answers on this router are 400, not 404. Clients depend on that.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from api.models import (
    EducationRequest,
    ExperienceRequest,
    MessageResponse,
    ProfileRequest,
    ProfileResponse,
    json_body,
)
from auth.dependencies import get_current_user
from auth.models import TokenClaim
from auth.store import UserStore
from core.config import Settings
from core.errors import NotFound
from core.fetcher import fetch_github_repos
from posts.store import PostStore
from profiles.models import Education, Experience, Profile
from profiles.store import ProfileStore

logger = logging.getLogger("devconnector.api.profile")

router = APIRouter()

_SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")
_SCALAR_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")


def build_profile_fields(body: ProfileRequest) -> dict[str, Any]:
    """Translate a ProfileRequest into the fields to write.

    Empty values are left out so an update never blanks a stored field.
    skills is split on commas and trimmed. social is always written, so the
    set of links is replaced wholesale on every update.
    """
    fields: dict[str, Any] = {}
    for name in _SCALAR_FIELDS:
        value = getattr(body, name)
        if value:
            fields[name] = value
    if body.skills:
        fields["skills"] = [s.strip() for s in body.skills.split(",")]
    fields["social"] = {name: getattr(body, name) for name in _SOCIAL_FIELDS if getattr(body, name)}
    return fields


def _no_profile() -> NotFound:
    return NotFound("There is no profile for this user", status_code=400)


def _populated(profile: Profile, user_store: UserStore) -> ProfileResponse:
    return ProfileResponse.from_domain(profile, populate=True, owner=user_store.get_by_id(profile.user))


# ---------------------------------------------------------------------------
# Profile documents
# ---------------------------------------------------------------------------


@router.get("/profile/me", response_model=ProfileResponse)
def my_profile(request: Request, claim: TokenClaim = Depends(get_current_user)) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    profile = profiles.get_by_user(claim.id)
    if profile is None:
        raise _no_profile()
    return _populated(profile, request.app.state.user_store)


@router.post("/profile", response_model=ProfileResponse)
def upsert_profile(
    request: Request,
    claim: TokenClaim = Depends(get_current_user),
    body: ProfileRequest = Depends(json_body(ProfileRequest)),
) -> ProfileResponse:
    """Create the caller's profile, or update it if one exists."""
    profiles: ProfileStore = request.app.state.profile_store
    profile = profiles.upsert(claim.id, build_profile_fields(body))
    return ProfileResponse.from_domain(profile)


@router.get("/profile", response_model=list[ProfileResponse])
def list_profiles(request: Request) -> list[ProfileResponse]:
    profiles: ProfileStore = request.app.state.profile_store
    user_store: UserStore = request.app.state.user_store
    all_profiles = profiles.list_profiles()
    owners = user_store.get_many([p.user for p in all_profiles])
    return [ProfileResponse.from_domain(p, populate=True, owner=owners.get(p.user)) for p in all_profiles]


@router.get("/profile/user/{user_id}", response_model=ProfileResponse)
def profile_by_user(request: Request, user_id: str) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    profile = profiles.get_by_user(user_id)
    if profile is None:
        raise NotFound("Profile not found", status_code=400)
    return _populated(profile, request.app.state.user_store)


@router.delete("/profile", response_model=MessageResponse)
def delete_account(request: Request, claim: TokenClaim = Depends(get_current_user)) -> MessageResponse:
    """Delete the caller's posts, profile, and user record, in that order."""
    post_store: PostStore = request.app.state.post_store
    profiles: ProfileStore = request.app.state.profile_store
    user_store: UserStore = request.app.state.user_store

    removed_posts = post_store.delete_by_user(claim.id)
    profiles.delete_by_user(claim.id)
    user_store.delete_user(claim.id)
    logger.info("Deleted user %s (%d posts)", claim.id, removed_posts)
    return MessageResponse(msg="User deleted")


# ---------------------------------------------------------------------------
# Experience / education
# ---------------------------------------------------------------------------


@router.put("/profile/experience", response_model=ProfileResponse)
def add_experience(
    request: Request,
    claim: TokenClaim = Depends(get_current_user),
    body: ExperienceRequest = Depends(json_body(ExperienceRequest)),
) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    entry = Experience(
        title=body.title,
        company=body.company,
        location=body.location,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = profiles.add_experience(claim.id, entry)
    if profile is None:
        raise _no_profile()
    return ProfileResponse.from_domain(profile)


@router.delete("/profile/experience/{exp_id}", response_model=ProfileResponse)
def delete_experience(request: Request, exp_id: str, claim: TokenClaim = Depends(get_current_user)) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    profile = profiles.remove_experience(claim.id, exp_id)
    if profile is None:
        raise _no_profile()
    return ProfileResponse.from_domain(profile)


@router.put("/profile/education", response_model=ProfileResponse)
def add_education(
    request: Request,
    claim: TokenClaim = Depends(get_current_user),
    body: EducationRequest = Depends(json_body(EducationRequest)),
) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    entry = Education(
        school=body.school,
        degree=body.degree,
        fieldofstudy=body.fieldofstudy,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = profiles.add_education(claim.id, entry)
    if profile is None:
        raise _no_profile()
    return ProfileResponse.from_domain(profile)


@router.delete("/profile/education/{edu_id}", response_model=ProfileResponse)
def delete_education(request: Request, edu_id: str, claim: TokenClaim = Depends(get_current_user)) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profile_store
    profile = profiles.remove_education(claim.id, edu_id)
    if profile is None:
        raise _no_profile()
    return ProfileResponse.from_domain(profile)


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


@router.get("/profile/github/{username}")
def github_repos(request: Request, username: str) -> list[dict[str, Any]]:
    """Proxy GitHub's repo listing so OAuth app credentials stay server-side."""
    settings: Settings = request.app.state.settings
    repos: Optional[list[dict[str, Any]]] = fetch_github_repos(
        username,
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
    )
    if repos is None:
        raise NotFound("No Github profile found")
    return repos
