"""Group discussions — discussions, members, group evidence and responses.

Revision ID: 002_group_discussions
Revises: 001_initial
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_group_discussions"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "group_discussions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("topic_id", UUID(as_uuid=True), sa.ForeignKey("controversial_topics.id"), nullable=False),
        sa.Column("created_by", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="active"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("status IN ('active', 'closed')", name="ck_group_discussions_status"),
    )
    op.create_index("ix_group_discussions_topic_id", "group_discussions", ["topic_id"])

    op.create_table(
        "group_discussion_participants",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("discussion_id", UUID(as_uuid=True), sa.ForeignKey("group_discussions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("stance", sa.String(10), nullable=False),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("has_submitted_evidence", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("evidence_count", sa.Integer, nullable=False, server_default="0"),
        _timestamp("joined_at"),
        sa.UniqueConstraint("discussion_id", "user_id", name="uq_group_participants_member"),
        sa.CheckConstraint("stance IN ('agree', 'disagree')", name="ck_group_participants_stance"),
    )
    op.create_index(
        "ix_group_discussion_participants_discussion_id",
        "group_discussion_participants", ["discussion_id"],
    )

    op.create_table(
        "group_evidence",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("discussion_id", UUID(as_uuid=True), sa.ForeignKey("group_discussions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("claim", sa.Text, nullable=False),
        sa.Column("source_url", sa.String(2000), nullable=True),
        sa.Column("source_type", sa.String(20), nullable=True),
        sa.Column("source_rating", sa.Integer, nullable=True),
        sa.Column("source_confidence", sa.String(10), nullable=True),
        sa.Column("source_reasoning", sa.JSON, nullable=True),
        sa.Column("source_warning", sa.Text, nullable=True),
        _timestamp("created_at"),
        sa.CheckConstraint(
            "source_rating IS NULL OR (source_rating BETWEEN 1 AND 5)",
            name="ck_group_evidence_source_rating",
        ),
    )
    op.create_index("ix_group_evidence_discussion_id", "group_evidence", ["discussion_id"])

    op.create_table(
        "group_evidence_responses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("evidence_id", UUID(as_uuid=True), sa.ForeignKey("group_evidence.id", ondelete="CASCADE"), nullable=False),
        sa.Column("respondent_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("response_type", sa.String(10), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("evidence_id", "respondent_id", name="uq_group_responses_respondent"),
        sa.CheckConstraint("response_type IN ('agree', 'disagree')", name="ck_group_responses_type"),
    )
    op.create_index(
        "ix_group_evidence_responses_evidence_id",
        "group_evidence_responses", ["evidence_id"],
    )


def downgrade() -> None:
    op.drop_table("group_evidence_responses")
    op.drop_table("group_evidence")
    op.drop_table("group_discussion_participants")
    op.drop_table("group_discussions")
