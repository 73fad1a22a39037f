"""
posts/models.py -- Domain dataclasses for posts, likes, and comments.

Pure data containers. likes and comments are ordered newest-first. name and
avatar are copied from the author when the post or comment is written, so a
post keeps rendering after its author changes or deletes their account.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Like:
    user: str
    id: Optional[str] = None


@dataclass
class Comment:
    user: str
    text: str
    name: str = ""
    avatar: str = ""
    id: Optional[str] = None
    date: str = ""


@dataclass
class Post:
    """A post. user is the owner reference; at most one Like per user."""

    user: str
    text: str
    name: str = ""
    avatar: str = ""
    likes: list[Like] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    id: Optional[str] = None
    date: str = ""  # ISO 8601, set by store on insert

    def liked_by(self, user_id: str) -> bool:
        return any(like.user == user_id for like in self.likes)
