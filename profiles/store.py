"""
profiles/store.py -- SQLAlchemy-backed persistence layer for developer profiles.

Uses SQLAlchemy Core (not ORM) so the dataclasses in profiles/models.py stay
the authoritative domain representation.

Document layout: one row per profile. The nested collections (skills, social,
experience, education) are JSON serialized into Text columns so a profile is
read and written as a single document. Adding or removing a nested entry is a
read-modify-write inside one transaction; concurrent writers to the same
profile are last-write-wins.

Usage:
    store = ProfileStore("sqlite:///devconnector.db")
    profile = store.upsert(user_id, {"status": "Developer", "skills": ["python"]})
    store.add_experience(user_id, Experience(title="Engineer", company="Acme", from_date="2020-01-01"))
    store.close()
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.database import make_engine
from core.ids import new_id
from profiles.models import Education, Experience, Profile

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_profiles = Table(
    "profiles",
    metadata,
    Column("id", String(24), primary_key=True),
    Column("user", String(24), nullable=False, unique=True),
    Column("company", String(255)),
    Column("website", String(255)),
    Column("location", String(255)),
    Column("status", String(255), nullable=False),
    Column("skills", Text, nullable=False),  # JSON array of strings
    Column("bio", Text),
    Column("githubusername", String(255)),
    Column("social", Text),  # JSON object
    Column("experience", Text),  # JSON array, newest first
    Column("education", Text),  # JSON array, newest first
    Column("date", String(32), nullable=False),
)

# Scalar columns a create-or-update may set. Anything else passed to upsert()
# is rejected rather than silently written.
_UPDATABLE = {"company", "website", "location", "status", "skills", "bio", "githubusername", "social"}
_JSON_COLUMNS = {"skills", "social"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _encode(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: json.dumps(v) if k in _JSON_COLUMNS else v for k, v in fields.items()}


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProfileStore:
    """Repository for Profile documents and their nested entries."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Profile documents
    # ------------------------------------------------------------------

    def get_by_user(self, user_id: str) -> Optional[Profile]:
        """Return the profile owned by user_id, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(_profiles.select().where(_profiles.c.user == user_id)).fetchone()
        return _row_to_profile(row) if row is not None else None

    def list_profiles(self) -> list[Profile]:
        """Return every profile, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_profiles.select().order_by(_profiles.c.date)).fetchall()
        return [_row_to_profile(r) for r in rows]

    def upsert(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """Create the user's profile, or overwrite the given fields on the existing one.

        Only keys present in fields are written; columns not mentioned keep
        their stored value. Nested experience/education are never touched.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)!r}")
        with self.engine.begin() as conn:
            existing = conn.execute(_profiles.select().where(_profiles.c.user == user_id)).fetchone()
            if existing is not None:
                if fields:
                    conn.execute(_profiles.update().where(_profiles.c.user == user_id).values(**_encode(fields)))
            else:
                values = {"skills": [], "social": {}, **fields}
                conn.execute(
                    _profiles.insert().values(
                        id=new_id(),
                        user=user_id,
                        experience="[]",
                        education="[]",
                        date=_now_iso(),
                        **_encode(values),
                    )
                )
            row = conn.execute(_profiles.select().where(_profiles.c.user == user_id)).fetchone()
        return _row_to_profile(row)

    def delete_by_user(self, user_id: str) -> bool:
        """Delete the user's profile. Returns True if a profile was removed."""
        with self.engine.begin() as conn:
            result = conn.execute(_profiles.delete().where(_profiles.c.user == user_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Nested entries
    # ------------------------------------------------------------------

    def add_experience(self, user_id: str, entry: Experience) -> Optional[Profile]:
        """Insert entry at the front of the experience list. None if no profile."""
        entry.id = new_id()
        return self._mutate(user_id, "experience", lambda items: [asdict(entry)] + items)

    def remove_experience(self, user_id: str, exp_id: str) -> Optional[Profile]:
        """Remove the experience entry with exp_id. Unknown ids leave the list unchanged."""
        return self._mutate(user_id, "experience", lambda items: [i for i in items if i["id"] != exp_id])

    def add_education(self, user_id: str, entry: Education) -> Optional[Profile]:
        """Insert entry at the front of the education list. None if no profile."""
        entry.id = new_id()
        return self._mutate(user_id, "education", lambda items: [asdict(entry)] + items)

    def remove_education(self, user_id: str, edu_id: str) -> Optional[Profile]:
        """Remove the education entry with edu_id. Unknown ids leave the list unchanged."""
        return self._mutate(user_id, "education", lambda items: [i for i in items if i["id"] != edu_id])

    def _mutate(self, user_id: str, column: str, change) -> Optional[Profile]:
        """Apply change() to one JSON list column of the user's profile in a single transaction."""
        col = _profiles.c[column]
        with self.engine.begin() as conn:
            row = conn.execute(_profiles.select().where(_profiles.c.user == user_id)).fetchone()
            if row is None:
                return None
            items = json.loads(getattr(row, column) or "[]")
            conn.execute(_profiles.update().where(_profiles.c.user == user_id).values({col: json.dumps(change(items))}))
            row = conn.execute(_profiles.select().where(_profiles.c.user == user_id)).fetchone()
        return _row_to_profile(row)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_profile(row) -> Profile:
    return Profile(
        id=row.id,
        user=row.user,
        company=row.company,
        website=row.website,
        location=row.location,
        status=row.status,
        skills=json.loads(row.skills or "[]"),
        bio=row.bio,
        githubusername=row.githubusername,
        social=json.loads(row.social or "{}"),
        experience=[Experience(**e) for e in json.loads(row.experience or "[]")],
        education=[Education(**e) for e in json.loads(row.education or "[]")],
        date=row.date,
    )
