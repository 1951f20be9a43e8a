"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Debate is the aggregate root for evidence and challenges
    - GroupDiscussion is the aggregate root for members, group evidence and responses

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from arguably.models.profile import Profile  # noqa: F401
from arguably.models.user_role import UserRole  # noqa: F401
from arguably.models.debate import Debate  # noqa: F401
from arguably.models.evidence import Evidence  # noqa: F401
from arguably.models.challenge import Challenge  # noqa: F401
from arguably.models.discussion_post import DiscussionPost, PostLike  # noqa: F401
from arguably.models.debate_challenge import DebateChallenge  # noqa: F401
from arguably.models.debate_evaluation import DebateEvaluation  # noqa: F401
from arguably.models.controversial_topic import ControversialTopic  # noqa: F401
from arguably.models.notification import Notification  # noqa: F401
from arguably.models.group_discussion import (  # noqa: F401
    GroupDiscussion,
    GroupDiscussionParticipant,
    GroupEvidence,
    GroupEvidenceResponse,
)
