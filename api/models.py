"""
API request and response models for DevConnector REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py,
profiles/models.py and posts/models.py, which own the internal domain
representation. Route handlers map between the two.

Request validation: every field a route requires is declared with an empty
default and listed in the model's `required_messages`. A single wildcard
validator turns an empty value into a PydanticCustomError carrying the
client-facing message, so missing and blank fields produce the same error.
Missing required fields are filled in under their wire name before
validation, so errors for aliased fields report "from", not "from_date".
api/main.py reshapes RequestValidationError into {"errors": [...]}.

Request bodies are read through json_body(Model) rather than as FastAPI body
parameters, so an empty request body validates as {} and still yields the
per-field messages.

Response shape: ids serialize as "_id" and experience/education dates as
"from"/"to", matching the document-style JSON existing clients consume.
"""

import json
from typing import Annotated, Any, Callable, ClassVar, Optional, TypeVar, Union

from email_validator import EmailNotValidError, validate_email
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from auth.models import User
from posts.models import Comment, Like, Post
from profiles.models import Education, Experience, Profile

# Passwords are compared byte for byte; never trim them.
Password = Annotated[str, StringConstraints(strip_whitespace=False, max_length=255)]


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise PydanticCustomError("email", "Please include a valid email") from exc
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class _RequestModel(BaseModel):
    """Base for request bodies with per-field "is required" messages."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_default=True, populate_by_name=True)

    required_messages: ClassVar[dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def fill_missing(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name in cls.required_messages:
            key = cls.model_fields[name].alias or name
            if data.get(key) is None and data.get(name) is None:
                data.pop(name, None)
                data[key] = ""
        return data

    @field_validator("*")
    @classmethod
    def check_required(cls, value, info: ValidationInfo):
        message = cls.required_messages.get(info.field_name)
        if message and (value is None or value == ""):
            raise PydanticCustomError("required", message)
        return value


ModelT = TypeVar("ModelT", bound=_RequestModel)


def json_body(model: type[ModelT]) -> Callable[[Request], Any]:
    """Dependency factory: parse the request body into model.

    An empty body is treated as {}. Errors are raised as RequestValidationError
    with a ("body", ...) location, the same shape FastAPI produces itself.
    """

    async def dependency(request: Request) -> ModelT:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw.strip() else {}
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "Invalid JSON body", "input": None}]
            ) from exc
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            errors = [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
            raise RequestValidationError(errors) from exc

    return dependency


class RegisterRequest(_RequestModel):
    """Request body for POST /api/users."""

    required_messages: ClassVar[dict[str, str]] = {"name": "Name is required"}

    name: str = ""
    email: str = ""
    password: Password = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise PydanticCustomError("password_length", "Please enter a password with 6 or more characters")
        return value


class LoginRequest(_RequestModel):
    """Request body for POST /api/auth."""

    required_messages: ClassVar[dict[str, str]] = {"password": "Password is required"}

    email: str = ""
    password: Password = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)


class ProfileRequest(_RequestModel):
    """Request body for POST /api/profile (create or update).

    skills arrives as a comma-separated string; the route splits it.
    The five social fields are flattened here and nested under "social" in
    the stored profile.
    """

    required_messages: ClassVar[dict[str, str]] = {
        "status": "Status is required",
        "skills": "Skills is required",
    }

    status: str = ""
    skills: str = ""
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class ExperienceRequest(_RequestModel):
    """Request body for PUT /api/profile/experience."""

    required_messages: ClassVar[dict[str, str]] = {
        "title": "Title is required",
        "company": "Company is required",
        "from_date": "From date is required",
    }

    title: str = ""
    company: str = ""
    from_date: str = Field(default="", alias="from")
    location: Optional[str] = None
    to_date: Optional[str] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class EducationRequest(_RequestModel):
    """Request body for PUT /api/profile/education."""

    required_messages: ClassVar[dict[str, str]] = {
        "school": "School is required",
        "degree": "Degree is required",
        "fieldofstudy": "Field of study is required",
        "from_date": "From date is required",
    }

    school: str = ""
    degree: str = ""
    fieldofstudy: str = ""
    from_date: str = Field(default="", alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class TextRequest(_RequestModel):
    """Request body for POST /api/posts and POST /api/posts/comment/{id}."""

    required_messages: ClassVar[dict[str, str]] = {"text": "Text is required"}

    text: str = ""


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class _ResponseModel(BaseModel):
    """Base for responses. Fields are set by name and serialized by alias."""

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(_ResponseModel):
    msg: str


class TokenResponse(_ResponseModel):
    token: str


class UserResponse(_ResponseModel):
    """A user record as returned by GET /api/auth. Never includes the password hash."""

    id: str = Field(alias="_id")
    name: str
    email: str
    avatar: str
    date: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, avatar=user.avatar, date=user.date)


class UserRef(_ResponseModel):
    """The populated owner reference embedded in profile responses."""

    id: str = Field(alias="_id")
    name: str
    avatar: str


class ExperienceResponse(_ResponseModel):
    id: str = Field(alias="_id")
    title: str
    company: str
    location: Optional[str] = None
    from_date: str = Field(alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None

    @classmethod
    def from_domain(cls, e: Experience) -> "ExperienceResponse":
        return cls(
            id=e.id,
            title=e.title,
            company=e.company,
            location=e.location,
            from_date=e.from_date,
            to_date=e.to_date,
            current=e.current,
            description=e.description,
        )


class EducationResponse(_ResponseModel):
    id: str = Field(alias="_id")
    school: str
    degree: str
    fieldofstudy: str
    from_date: str = Field(alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None

    @classmethod
    def from_domain(cls, e: Education) -> "EducationResponse":
        return cls(
            id=e.id,
            school=e.school,
            degree=e.degree,
            fieldofstudy=e.fieldofstudy,
            from_date=e.from_date,
            to_date=e.to_date,
            current=e.current,
            description=e.description,
        )


class ProfileResponse(_ResponseModel):
    """A profile document.

    user is the owner id on write routes, and a populated UserRef on read
    routes. It is None when a read route populates a profile whose user record
    no longer exists.
    """

    id: str = Field(alias="_id")
    user: Union[UserRef, str, None]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: list[str]
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: dict[str, str]
    experience: list[ExperienceResponse]
    education: list[EducationResponse]
    date: str

    @classmethod
    def from_domain(
        cls,
        profile: Profile,
        populate: bool = False,
        owner: Optional[User] = None,
    ) -> "ProfileResponse":
        """Factory Method: map a Profile dataclass to its response shape.

        With populate=True the user field becomes {_id, name, avatar} of
        owner (or None when the owner is gone); otherwise it stays the id.
        """
        if populate:
            user = UserRef(id=owner.id, name=owner.name, avatar=owner.avatar) if owner else None
        else:
            user = profile.user
        return cls(
            id=profile.id,
            user=user,
            company=profile.company,
            website=profile.website,
            location=profile.location,
            status=profile.status,
            skills=profile.skills,
            bio=profile.bio,
            githubusername=profile.githubusername,
            social=profile.social,
            experience=[ExperienceResponse.from_domain(e) for e in profile.experience],
            education=[EducationResponse.from_domain(e) for e in profile.education],
            date=profile.date,
        )


class LikeResponse(_ResponseModel):
    id: str = Field(alias="_id")
    user: str

    @classmethod
    def from_domain(cls, like: Like) -> "LikeResponse":
        return cls(id=like.id, user=like.user)


class CommentResponse(_ResponseModel):
    id: str = Field(alias="_id")
    user: str
    text: str
    name: str
    avatar: str
    date: str

    @classmethod
    def from_domain(cls, c: Comment) -> "CommentResponse":
        return cls(id=c.id, user=c.user, text=c.text, name=c.name, avatar=c.avatar, date=c.date)


class PostResponse(_ResponseModel):
    id: str = Field(alias="_id")
    user: str
    text: str
    name: str
    avatar: str
    likes: list[LikeResponse]
    comments: list[CommentResponse]
    date: str

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            user=post.user,
            text=post.text,
            name=post.name,
            avatar=post.avatar,
            likes=[LikeResponse.from_domain(x) for x in post.likes],
            comments=[CommentResponse.from_domain(c) for c in post.comments],
            date=post.date,
        )
