"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in profiles/models.py and posts/models.py -- dataclasses own domain shape;
stores and routes do the work.

Layer rule: no imports from api/, profiles/, or posts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is unique across all users (enforced by a UNIQUE index and checked
    before insert). hashed_password is a bcrypt hash and is never returned by
    any route. avatar is the Gravatar URL derived from the email at sign-up.
    """

    name: str
    email: str
    hashed_password: str
    avatar: str = ""
    id: str | None = None
    date: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class TokenClaim:
    """The verified identity carried by a session token.

    Attached to request.state.user by the auth guard. Handlers compare
    claim.id against stored owner references.
    """

    id: str
