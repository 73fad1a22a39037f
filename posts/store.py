"""
posts/store.py -- SQLAlchemy-backed persistence layer for posts.

Same document layout as profiles/store.py: one row per post, likes and
comments JSON serialized in Text columns. The store does not enforce the
like/unlike guards or comment ownership -- route handlers check those against
the Post they loaded and then write the new list back with replace_likes() /
replace_comments().

Usage:
    store = PostStore("sqlite:///devconnector.db")
    post = store.create_post(Post(user=user_id, text="Hello", name="Ada"))
    store.replace_likes(post.id, [Like(user=user_id, id=new_id())])
    store.close()
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.database import make_engine
from core.ids import new_id
from posts.models import Comment, Like, Post

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_posts = Table(
    "posts",
    metadata,
    Column("id", String(24), primary_key=True),
    Column("user", String(24), nullable=False, index=True),
    Column("text", Text, nullable=False),
    Column("name", String(255)),
    Column("avatar", Text),
    Column("likes", Text, nullable=False),  # JSON array, newest first
    Column("comments", Text, nullable=False),  # JSON array, newest first
    Column("date", String(32), nullable=False),
)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PostStore:
    """Repository for Post documents."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def create_post(self, post: Post) -> Post:
        """Insert a new post with empty likes/comments and return the stored record."""
        post_id = new_id()
        with self.engine.begin() as conn:
            conn.execute(
                _posts.insert().values(
                    id=post_id,
                    user=post.user,
                    text=post.text,
                    name=post.name,
                    avatar=post.avatar,
                    likes="[]",
                    comments="[]",
                    date=now_iso(),
                )
            )
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row)

    def get_post(self, post_id: str) -> Optional[Post]:
        with self.engine.connect() as conn:
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_posts(self) -> list[Post]:
        """Return every post, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_posts.select().order_by(_posts.c.date.desc(), _posts.c.id.desc())).fetchall()
        return [_row_to_post(r) for r in rows]

    def delete_post(self, post_id: str) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(_posts.delete().where(_posts.c.id == post_id))
        return result.rowcount > 0

    def delete_by_user(self, user_id: str) -> int:
        """Delete every post authored by user_id. Returns the number removed."""
        with self.engine.begin() as conn:
            result = conn.execute(_posts.delete().where(_posts.c.user == user_id))
        return result.rowcount

    def replace_likes(self, post_id: str, likes: list[Like]) -> bool:
        """Overwrite the post's likes list. Returns False if the post is gone."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _posts.update().where(_posts.c.id == post_id).values(likes=json.dumps([asdict(x) for x in likes]))
            )
        return result.rowcount > 0

    def replace_comments(self, post_id: str, comments: list[Comment]) -> bool:
        """Overwrite the post's comments list. Returns False if the post is gone."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _posts.update()
                .where(_posts.c.id == post_id)
                .values(comments=json.dumps([asdict(c) for c in comments]))
            )
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        user=row.user,
        text=row.text,
        name=row.name or "",
        avatar=row.avatar or "",
        likes=[Like(**x) for x in json.loads(row.likes or "[]")],
        comments=[Comment(**c) for c in json.loads(row.comments or "[]")],
        date=row.date,
    )
