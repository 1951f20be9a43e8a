"""Initial schema — profiles, debates, evidence, challenges, invitations, community tables.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("avatar_url", sa.String(2000), nullable=True),
        sa.Column("political_view", sa.String(100), nullable=True),
        sa.Column("religion", sa.String(100), nullable=True),
        sa.Column("university_degree", sa.String(200), nullable=True),
        sa.Column("beliefs", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("about_me", sa.Text, nullable=True),
        _created_at(),
    )
    op.create_index(
        "uq_profiles_username_lower", "profiles", [sa.text("lower(username)")], unique=True,
    )

    op.create_table(
        "user_roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(10), nullable=False, server_default="user"),
        _created_at(),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
        sa.CheckConstraint("role IN ('admin', 'user')", name="ck_user_roles_role"),
    )

    op.create_table(
        "debates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("topic", sa.Text, nullable=False),
        sa.Column("participant1_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("participant2_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("participant1_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("participant2_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("evidence_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("timer_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("participant1_id <> participant2_id", name="ck_debates_distinct_participants"),
        sa.CheckConstraint("status IN ('active', 'completed')", name="ck_debates_status"),
    )
    op.create_index("ix_debates_participant1_id", "debates", ["participant1_id"])
    op.create_index("ix_debates_participant2_id", "debates", ["participant2_id"])

    op.create_table(
        "evidence",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("debate_id", UUID(as_uuid=True), sa.ForeignKey("debates.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("claim", sa.Text, nullable=False),
        sa.Column("source_url", sa.String(2000), nullable=True),
        sa.Column("source_type", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("source_rating", sa.Integer, nullable=True),
        sa.Column("source_confidence", sa.String(10), nullable=True),
        sa.Column("source_reasoning", sa.JSON, nullable=True),
        sa.Column("source_warning", sa.Text, nullable=True),
        sa.Column("claim_evaluation", sa.String(20), nullable=True),
        sa.Column("suggested_correction", sa.Text, nullable=True),
        sa.Column("quote_example", sa.Text, nullable=True),
        sa.Column("content_analyzed", sa.Boolean, nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "status IN ('pending', 'agreed', 'challenged', 'validated', 'evidence_requested')",
            name="ck_evidence_status",
        ),
        sa.CheckConstraint(
            "source_rating IS NULL OR (source_rating BETWEEN 1 AND 5)",
            name="ck_evidence_source_rating",
        ),
    )
    op.create_index("ix_evidence_debate_id", "evidence", ["debate_id"])

    op.create_table(
        "challenges",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("evidence_id", UUID(as_uuid=True), sa.ForeignKey("evidence.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("claim", sa.Text, nullable=False),
        sa.Column("source_url", sa.String(2000), nullable=False),
        sa.Column("source_type", sa.String(20), nullable=False),
        _created_at(),
    )
    op.create_index("ix_challenges_evidence_id", "challenges", ["evidence_id"])

    op.create_table(
        "discussion_posts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("likes_count", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_discussion_posts_user_id", "discussion_posts", ["user_id"])

    op.create_table(
        "post_likes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("discussion_posts.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("user_id", "post_id", name="uq_post_likes_user_post"),
    )
    op.create_index("ix_post_likes_post_id", "post_likes", ["post_id"])

    op.create_table(
        "debate_challenges",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("challenger_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("challenged_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("topic", sa.Text, nullable=False),
        sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("discussion_posts.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", sa.String(10), nullable=False, server_default="pending"),
        sa.Column("debate_id", UUID(as_uuid=True), sa.ForeignKey("debates.id"), nullable=True),
        _created_at(),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'declined')", name="ck_debate_challenges_status"),
        sa.CheckConstraint("challenger_id <> challenged_id", name="ck_debate_challenges_distinct_users"),
    )
    op.create_index("ix_debate_challenges_challenger_id", "debate_challenges", ["challenger_id"])
    op.create_index("ix_debate_challenges_challenged_id", "debate_challenges", ["challenged_id"])

    op.create_table(
        "debate_evaluations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("debate_id", UUID(as_uuid=True), sa.ForeignKey("debates.id", ondelete="CASCADE"), nullable=False),
        sa.Column("evaluation", sa.Text, nullable=False),
        sa.Column("evidence_count", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_debate_evaluations_debate_id", "debate_evaluations", ["debate_id"])

    op.create_table(
        "controversial_topics",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("controversy", sa.Text, nullable=False, server_default=""),
        sa.Column("week_start", sa.Date, nullable=False),
        _created_at(),
        sa.UniqueConstraint("week_start", "category", name="uq_topics_week_category"),
        sa.CheckConstraint("category IN ('Politics', 'Religion', 'Finance')", name="ck_topics_category"),
    )
    op.create_index("ix_controversial_topics_week_start", "controversial_topics", ["week_start"])

    op.create_table(
        "notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("recipient_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("actor_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("debate_id", UUID(as_uuid=True), sa.ForeignKey("debates.id", ondelete="CASCADE"), nullable=True),
        sa.Column("evidence_id", UUID(as_uuid=True), sa.ForeignKey("evidence.id", ondelete="CASCADE"), nullable=True),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("read", sa.Boolean, nullable=False, server_default="false"),
        _created_at(),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("controversial_topics")
    op.drop_table("debate_evaluations")
    op.drop_table("debate_challenges")
    op.drop_table("post_likes")
    op.drop_table("discussion_posts")
    op.drop_table("challenges")
    op.drop_table("evidence")
    op.drop_table("debates")
    op.drop_table("user_roles")
    op.drop_table("profiles")
