"""TopicSubscriber ORM - enrollment links between subscribers and topics.

Invariants:
    - Always belongs to a Topic (topic_id FK) and a Subscriber (subscriber_id FK)
    - Insert-only from the enrollment core: never updated or deleted there

Design Decisions:
    - topic_key and external_subscriber_id denormalized: reverse lookups
      ("which topics is subscriber X in") without joining topics/subscribers
    - Unique (topic_id, subscriber_id): uq_topic_subscribers_topic_subscriber lets the
      store skip links that already exist instead of duplicating them on retry
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from topic_enrollment.db.base import Base


class TopicSubscriber(Base):
    """Enrollment link - one subscriber in one topic."""
    __tablename__ = "topic_subscribers"
    __table_args__ = (
        UniqueConstraint(
            "topic_id", "subscriber_id",
            name="uq_topic_subscribers_topic_subscriber",
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
    topic_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("topics.id", ondelete="CASCADE"),
        nullable=False,
    )
    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("subscribers.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic_key: Mapped[str] = mapped_column(String(255), nullable=False)
    external_subscriber_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    topic: Mapped["Topic"] = relationship(
        "Topic", back_populates="subscriptions",
    )
