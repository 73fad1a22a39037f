"""
auth/permissions.py -- Ownership checks for owned resources.

Posts and comments each store the id of the user who created them. Every
handler that deletes or edits an owned record goes through ensure_owner() so
the comparison and the error it produces are identical everywhere.
"""

from __future__ import annotations

from auth.models import TokenClaim
from core.errors import Forbidden


def is_owner(actor: TokenClaim, owner_ref: str | None) -> bool:
    """Return True if the acting identity is the stored owner."""
    return owner_ref is not None and actor.id == owner_ref


def ensure_owner(actor: TokenClaim, owner_ref: str | None) -> None:
    """Raise Forbidden ("User not authorized", 401) unless actor owns the record."""
    if not is_owner(actor, owner_ref):
        raise Forbidden()
