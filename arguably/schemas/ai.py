"""AI Response Schemas — strict contracts for everything the language model returns.

Invariants:
    - A payload either validates completely or is rejected; no partial recovery
    - RatingPayload.rating is an integer 1–5 (bools and strings rejected)
    - RatingPayload.reasoning is a non-empty list of non-blank strings
    - TopicsPayload holds exactly one topic per TopicCategory

Design Decisions:
    - camelCase aliases match the JSON the prompt asks for; Python side stays snake_case
    - StrictInt for the rating: "5" or 4.5 from the model means it ignored the contract
"""

from pydantic import (
    BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator,
)

from arguably.core.domain_types import (
    ClaimEvaluation, RatingConfidence, TopicCategory,
    MIN_SOURCE_RATING, MAX_SOURCE_RATING,
)
from arguably.core.weekly_topics import REQUIRED_CATEGORIES


class RatingPayload(BaseModel):
    """Source-credibility verdict for one claim + URL pair."""
    model_config = ConfigDict(populate_by_name=True)

    rating: StrictInt = Field(ge=MIN_SOURCE_RATING, le=MAX_SOURCE_RATING)
    claim_evaluation: ClaimEvaluation = Field(alias="claimEvaluation")
    confidence: RatingConfidence
    reasoning: list[str] = Field(min_length=1)
    warning: str | None = None
    suggested_correction: str | None = Field(None, alias="suggestedCorrection")
    quote_example: str | None = Field(None, alias="quoteExample")

    @field_validator("reasoning")
    @classmethod
    def reasoning_not_blank(cls, v: list[str]) -> list[str]:
        cleaned = [item.strip() for item in v]
        if any(not item for item in cleaned):
            raise ValueError("reasoning items cannot be blank")
        return cleaned

    @field_validator("warning", "suggested_correction", "quote_example")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class TopicPayload(BaseModel):
    category: TopicCategory
    title: str = Field(min_length=1, max_length=500)
    question: str | None = None
    description: str = ""
    controversy: str = ""

    @model_validator(mode="after")
    def default_question(self) -> "TopicPayload":
        if not self.question or not self.question.strip():
            self.question = self.title
        return self


class TopicsPayload(BaseModel):
    topics: list[TopicPayload]

    @model_validator(mode="after")
    def one_per_category(self) -> "TopicsPayload":
        categories = [t.category for t in self.topics]
        if len(categories) != len(REQUIRED_CATEGORIES) or set(categories) != REQUIRED_CATEGORIES:
            raise ValueError(
                "topics must contain exactly one of each category: "
                + ", ".join(sorted(c.value for c in TopicCategory)),
            )
        return self
