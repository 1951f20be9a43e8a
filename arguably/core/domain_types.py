"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProfileId, DebateId, EvidenceId wrap UUIDs — never use bare UUID in domain logic
    - SourceRating is bounded 1–5
    - All valid states encoded as Enums — no raw string matching
    - EvidenceStatus has exactly five members; no other value is legal

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProfileId = NewType("ProfileId", UUID)
DebateId = NewType("DebateId", UUID)
EvidenceId = NewType("EvidenceId", UUID)
GroupDiscussionId = NewType("GroupDiscussionId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

SourceRating = NewType("SourceRating", int)   # 1–5

MIN_SOURCE_RATING = 1
MAX_SOURCE_RATING = 5


# ─── Enums ───────────────────────────────────────────────────────

class EvidenceStatus(str, Enum):
    """Evidence lifecycle states — maps to DB `evidence.status` column."""
    PENDING = "pending"
    AGREED = "agreed"
    CHALLENGED = "challenged"
    VALIDATED = "validated"
    EVIDENCE_REQUESTED = "evidence_requested"


class EvidenceAction(str, Enum):
    """Participant actions on a single evidence item."""
    AGREE = "agree"
    CHALLENGE = "challenge"
    REQUEST_SOURCE = "request_source"
    VALIDATE = "validate"
    COUNTER_CHALLENGE = "counter_challenge"
    SUPPLY_SOURCE = "supply_source"


class ActorSide(str, Enum):
    """Which side of an evidence item may perform an action."""
    SUBMITTER = "submitter"
    OPPONENT = "opponent"


class DebateStatus(str, Enum):
    """Debate lifecycle — maps to DB `debates.status` column."""
    ACTIVE = "active"
    COMPLETED = "completed"


class SourceType(str, Enum):
    FACTUAL = "factual"
    OPINIONATED = "opinionated"


class ClaimEvaluation(str, Enum):
    """AI verdict on the claim itself (as opposed to the source)."""
    FACTUAL = "factual"
    PLAUSIBLE = "plausible"
    MISLEADING = "misleading"
    WRONG = "wrong"


class RatingConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InvitationStatus(str, Enum):
    """DebateChallenge (invitation) states."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class AppRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class TopicCategory(str, Enum):
    """Weekly controversial topic categories — exactly one topic per category."""
    POLITICS = "Politics"
    RELIGION = "Religion"
    FINANCE = "Finance"


class NotificationKind(str, Enum):
    DEBATE_INVITE = "debate_invite"
    CHALLENGE_INVITE = "challenge_invite"
    EVIDENCE_AGREED = "evidence_agreed"
    EVIDENCE_CHALLENGED = "evidence_challenged"
    SOURCE_REQUESTED = "source_requested"
    EVIDENCE_VALIDATED = "evidence_validated"
    COUNTER_CHALLENGE = "counter_challenge"
    SOURCE_SUPPLIED = "source_supplied"
    DEFEAT_ADMITTED = "defeat_admitted"


class GroupDiscussionStatus(str, Enum):
    """Group discussion lifecycle — maps to DB `group_discussions.status` column."""
    ACTIVE = "active"
    CLOSED = "closed"


class GroupStance(str, Enum):
    """A member's position on the discussion's topic question."""
    AGREE = "agree"
    DISAGREE = "disagree"


class GroupResponseType(str, Enum):
    AGREE = "agree"
    DISAGREE = "disagree"
