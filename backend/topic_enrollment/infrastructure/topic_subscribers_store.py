"""Topic Subscribers Store - bulk insert of enrollment links.

Invariants:
    - One statement and one transaction per add_subscribers call: all links or none
    - Links already present for (topic_id, subscriber_id) are skipped, so a retried
      enrollment does not duplicate rows
    - Any SQLAlchemy failure -> rollback, then LinkWriteError

Design Decisions:
    - INSERT ... ON CONFLICT DO NOTHING via the dialect's insert(): the skip happens in
      the database, so two concurrent enrollments of one subscriber also end with one row
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from topic_enrollment.core.domain_types import EnrollmentLink
from topic_enrollment.core.errors import ErrorContext, LinkWriteError
from topic_enrollment.models.topic_subscriber import TopicSubscriber

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlTopicSubscribersRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_subscribers(self, links: Sequence[EnrollmentLink]) -> None:
        if not links:
            return
        dialect = self.db.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise LinkWriteError(
                f"unsupported dialect '{dialect}'", len(links),
                ErrorContext(topic_key=links[0].topic_key),
            )

        now = datetime.now(timezone.utc)
        statement = insert(TopicSubscriber).values([
            {
                "id": uuid.uuid4(),
                "organization_id": link.organization_id,
                "environment_id": link.environment_id,
                "subscriber_id": link.subscriber_id,
                "topic_id": link.topic_id,
                "topic_key": link.topic_key,
                "external_subscriber_id": link.external_subscriber_id,
                "created_at": now,
            }
            for link in links
        ]).on_conflict_do_nothing(index_elements=["topic_id", "subscriber_id"])

        try:
            await self.db.execute(statement)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            topic_key = links[0].topic_key
            logger.error(
                f"Link insert failed: {e}", extra={"topic_key": topic_key},
            )
            raise LinkWriteError(
                "bulk insert failed", len(links),
                ErrorContext(topic_key=topic_key),
            ) from e
