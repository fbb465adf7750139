"""Subscriber ORM - directory entries addressed by tenant-supplied external ids.

Invariants:
    - subscriber_id is the external identity; id is internal
    - Always scoped by (organization_id, environment_id)

Design Decisions:
    - Indexed but NOT unique on (organization_id, environment_id, subscriber_id):
      the directory is owned upstream and may hold duplicate identities
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from topic_enrollment.db.base import Base


class Subscriber(Base):
    __tablename__ = "subscribers"
    __table_args__ = (
        Index(
            "ix_subscribers_org_env_subscriber_id",
            "organization_id", "environment_id", "subscriber_id",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    environment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    subscriber_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
