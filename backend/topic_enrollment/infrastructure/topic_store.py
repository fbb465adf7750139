"""Topic Store - SQLAlchemy implementation of TopicRepository.

Invariants:
    - find_topic_by_key is an exact match on (organization_id, environment_id, key)
    - create_topic commits immediately so concurrent requests can see the row
    - Unique violation -> DuplicateTopicKeyError; any other failure -> DatabaseError
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from topic_enrollment.core.domain_types import (
    EnvironmentId, OrganizationId, Topic, TopicId, TopicKey,
)
from topic_enrollment.core.errors import (
    DatabaseError, DuplicateTopicKeyError, ErrorContext,
)
from topic_enrollment.models.topic import Topic as TopicModel

logger = logging.getLogger(__name__)


def to_topic(row: TopicModel) -> Topic:
    return Topic(
        id=TopicId(row.id),
        organization_id=OrganizationId(row.organization_id),
        environment_id=EnvironmentId(row.environment_id),
        key=TopicKey(row.key),
        name=row.name,
    )


class SqlTopicRepository:
    """Topic persistence backed by the topics table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_topic_by_key(
        self, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic | None:
        try:
            result = await self.db.execute(
                select(TopicModel)
                .where(TopicModel.organization_id == organization_id)
                .where(TopicModel.environment_id == environment_id)
                .where(TopicModel.key == key)
            )
        except SQLAlchemyError as e:
            logger.error(f"Topic lookup failed: {e}", extra={"topic_key": key})
            raise DatabaseError("Topic lookup failed", "query") from e
        row = result.scalar_one_or_none()
        return to_topic(row) if row else None

    async def create_topic(
        self, name: str, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic:
        row = TopicModel(
            name=name, key=key,
            organization_id=organization_id, environment_id=environment_id,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateTopicKeyError(
                key,
                ErrorContext(
                    topic_key=key,
                    organization_id=str(organization_id),
                    environment_id=str(environment_id),
                ),
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Topic insert failed: {e}", extra={"topic_key": key})
            raise DatabaseError("Topic insert failed", "commit") from e
        return to_topic(row)
