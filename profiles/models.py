"""
profiles/models.py -- Domain dataclasses for developer profiles.

These are pure data containers with zero logic. Building profile fields from
a request and inserting/removing nested entries lives in profiles/store.py.

experience and education are ordered newest-first: new entries are inserted
at index 0. Each entry carries its own id so it can be removed later.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Experience:
    title: str
    company: str
    from_date: str
    location: Optional[str] = None
    to_date: Optional[str] = None
    current: bool = False
    description: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Education:
    school: str
    degree: str
    fieldofstudy: str
    from_date: str
    to_date: Optional[str] = None
    current: bool = False
    description: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Profile:
    """One developer profile. user is the owner reference (a User id).

    There is at most one profile per user. social holds whichever of
    youtube/twitter/facebook/linkedin/instagram the user supplied.

    id is None before the record is written to the database.
    """

    user: str
    status: str
    skills: list[str] = field(default_factory=list)
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: dict[str, str] = field(default_factory=dict)
    experience: list[Experience] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    id: Optional[str] = None
    date: str = ""  # ISO 8601, set by store on insert
