"""Topic ORM - persists broadcast groups keyed by (organization, environment, key).

Invariants:
    - key is unique per (organization_id, environment_id): uq_topics_org_env_key
    - name is display-only; provisional topics carry a prefix derived from the key

Design Decisions:
    - Uniqueness enforced in the database, not in the service: concurrent
      provisioning of the same key relies on this constraint to fail one writer
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from topic_enrollment.db.base import Base


class Topic(Base):
    """Topic entity - a named broadcast group in one tenant environment."""
    __tablename__ = "topics"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "environment_id", "key",
            name="uq_topics_org_env_key",
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
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    subscriptions: Mapped[list["TopicSubscriber"]] = relationship(
        "TopicSubscriber", back_populates="topic",
        cascade="all, delete-orphan",
    )
