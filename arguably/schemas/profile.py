"""Profile Schemas — sign-up, owner edits, and the public profile view.

Invariants:
    - username: 3-30 chars, letters/digits/underscore/dot, stripped
    - beliefs normalized to "#tag" form, blanks dropped, duplicates removed (order kept)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"
MAX_BELIEFS = 20


def normalize_beliefs(beliefs: list[str]) -> list[str]:
    """'  climate ' / '#climate' -> '#climate'; case preserved."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in beliefs:
        tag = raw.strip().lstrip("#").strip().replace(" ", "")
        if not tag:
            continue
        tag = f"#{tag}"
        if tag.lower() in seen:
            continue
        seen.add(tag.lower())
        result.append(tag)
    return result


class _ProfileFields(BaseModel):
    avatar_url: str | None = Field(None, max_length=2000)
    political_view: str | None = Field(None, max_length=100)
    religion: str | None = Field(None, max_length=100)
    university_degree: str | None = Field(None, max_length=200)
    phone_number: str | None = Field(None, max_length=32, pattern=r"^\+?[0-9 ()\-]{5,32}$")
    about_me: str | None = Field(None, max_length=2000)


class ProfileCreate(_ProfileFields):
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    beliefs: list[str] = Field(default_factory=list, max_length=MAX_BELIEFS)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("beliefs")
    @classmethod
    def tag_beliefs(cls, v: list[str]) -> list[str]:
        return normalize_beliefs(v)


class ProfileUpdate(_ProfileFields):
    """Partial update — only fields present in the request body are applied."""
    username: str | None = Field(
        None, min_length=3, max_length=30, pattern=USERNAME_PATTERN,
    )
    beliefs: list[str] | None = Field(None, max_length=MAX_BELIEFS)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("beliefs")
    @classmethod
    def tag_beliefs(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else normalize_beliefs(v)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    avatar_url: str | None = None
    political_view: str | None = None
    religion: str | None = None
    university_degree: str | None = None
    beliefs: list[str] = []
    about_me: str | None = None
    created_at: datetime


class RankResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    min_points: int
    icon: str


class RankProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current: RankResponse
    next: RankResponse | None
    progress: float


class ProfileDetailResponse(ProfileResponse):
    """Public profile plus points earned across all debates and rank progress."""
    total_points: int
    rank: RankProgressResponse
