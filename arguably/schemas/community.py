"""Community Schemas — discussion posts, likes, weekly topics and the notification inbox."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Posts --------------------------------------------------------------------

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = Field(None, max_length=5000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    likes_count: int
    created_at: datetime


class LikeToggleResponse(BaseModel):
    post_id: UUID
    liked: bool
    likes_count: int


# --- Weekly topics ------------------------------------------------------------

class TopicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category: str
    title: str
    question: str
    description: str
    controversy: str
    week_start: date


class WeeklyTopicsResponse(BaseModel):
    week_start: date
    topics: list[TopicResponse]


# --- Notifications ------------------------------------------------------------

class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recipient_id: UUID
    actor_id: UUID | None = None
    kind: str
    debate_id: UUID | None = None
    evidence_id: UUID | None = None
    message: str
    read: bool
    created_at: datetime
