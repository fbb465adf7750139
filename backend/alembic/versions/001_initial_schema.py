"""Initial schema - topics, subscribers, topic_subscribers.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "topics",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("organization_id", UUID(as_uuid=True), nullable=False),
        sa.Column("environment_id", UUID(as_uuid=True), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "organization_id", "environment_id", "key",
            name="uq_topics_org_env_key",
        ),
    )

    # Directory is owned upstream: index only, duplicates allowed
    op.create_table(
        "subscribers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("organization_id", UUID(as_uuid=True), nullable=False),
        sa.Column("environment_id", UUID(as_uuid=True), nullable=False),
        sa.Column("subscriber_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_subscribers_org_env_subscriber_id", "subscribers",
        ["organization_id", "environment_id", "subscriber_id"],
    )

    op.create_table(
        "topic_subscribers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("organization_id", UUID(as_uuid=True), nullable=False),
        sa.Column("environment_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "topic_id", UUID(as_uuid=True),
            sa.ForeignKey("topics.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "subscriber_id", UUID(as_uuid=True),
            sa.ForeignKey("subscribers.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("topic_key", sa.String(255), nullable=False),
        sa.Column("external_subscriber_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "topic_id", "subscriber_id",
            name="uq_topic_subscribers_topic_subscriber",
        ),
    )
    op.create_index(
        "ix_topic_subscribers_external_subscriber_id", "topic_subscribers",
        ["external_subscriber_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_topic_subscribers_external_subscriber_id", "topic_subscribers")
    op.drop_table("topic_subscribers")
    op.drop_index("ix_subscribers_org_env_subscriber_id", "subscribers")
    op.drop_table("subscribers")
    op.drop_table("topics")
