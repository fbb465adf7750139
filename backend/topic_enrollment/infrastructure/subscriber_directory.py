"""Subscriber Directory - SQLAlchemy implementation of SubscriberDirectory.

Invariants:
    - Returns only rows matching the requested external ids in the tenant scope
    - Duplicate rows for one external id are returned as-is
    - Any SQLAlchemy failure -> DirectoryLookupError
"""

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from topic_enrollment.core.domain_types import (
    EnvironmentId, ExternalSubscriberId, OrganizationId, Subscriber,
    SubscriberId,
)
from topic_enrollment.core.errors import DirectoryLookupError, ErrorContext
from topic_enrollment.models.subscriber import Subscriber as SubscriberModel

logger = logging.getLogger(__name__)


def to_subscriber(row: SubscriberModel) -> Subscriber:
    return Subscriber(
        id=SubscriberId(row.id),
        organization_id=OrganizationId(row.organization_id),
        environment_id=EnvironmentId(row.environment_id),
        subscriber_id=ExternalSubscriberId(row.subscriber_id),
    )


class SqlSubscriberDirectory:
    """Directory lookups against the subscribers table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_by_external_subscriber_ids(
        self, external_subscriber_ids: Sequence[ExternalSubscriberId],
        organization_id: OrganizationId, environment_id: EnvironmentId,
    ) -> list[Subscriber]:
        if not external_subscriber_ids:
            return []
        try:
            result = await self.db.execute(
                select(SubscriberModel)
                .where(SubscriberModel.organization_id == organization_id)
                .where(SubscriberModel.environment_id == environment_id)
                .where(
                    SubscriberModel.subscriber_id.in_(
                        sorted(set(external_subscriber_ids)),
                    ),
                )
                .order_by(SubscriberModel.created_at)
            )
        except SQLAlchemyError as e:
            logger.error(f"Subscriber search failed: {e}")
            raise DirectoryLookupError(
                "query failed",
                ErrorContext(
                    organization_id=str(organization_id),
                    environment_id=str(environment_id),
                ),
            ) from e
        return [to_subscriber(row) for row in result.scalars().all()]
