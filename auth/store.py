"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as profiles/store.py and
posts/store.py). UserStore is the repository; _row_to_user is the mapper.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  Emails are stored lowercased and trimmed so the UNIQUE index catches
  "Alice@Example.com" vs "alice@example.com".

Layer rule: no imports from api/, profiles/, or posts/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from auth.models import User
from core.database import make_engine
from core.ids import new_id

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(24), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("avatar", Text),
    Column("date", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///devconnector.db")
        user_id = store.create_user(User(name="Ada", email="ada@example.com", hashed_password=...))
        user = store.get_by_email("ada@example.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    def create_user(self, user: User) -> str:
        """Insert a new user and return its generated id.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        Callers check get_by_email() first; the IntegrityError covers the race
        where two registrations for the same email pass that check together.
        """
        user_id = new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _users.insert().values(
                    id=user_id,
                    name=user.name,
                    email=normalize_email(user.email),
                    hashed_password=user.hashed_password,
                    avatar=user.avatar,
                    date=_now_iso(),
                )
            )
            conn.commit()
        return user_id

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by email (case-insensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == normalize_email(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_many(self, user_ids: list[str]) -> dict[str, User]:
        """Return {id: User} for every id that exists. Unknown ids are skipped.

        Used to populate owner references on profile listings with one query
        instead of one per profile.
        """
        if not user_ids:
            return {}
        with self.engine.connect() as conn:
            rows = conn.execute(_users.select().where(_users.c.id.in_(set(user_ids)))).fetchall()
        return {row.id: _row_to_user(row) for row in rows}

    def delete_user(self, user_id: str) -> bool:
        """Permanently delete a user record. Returns True if deleted, False if not found.

        The caller is responsible for removing the user's profile and posts.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_users.delete().where(_users.c.id == user_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        avatar=row.avatar or "",
        date=row.date,
    )
