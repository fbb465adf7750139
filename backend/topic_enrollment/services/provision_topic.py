"""Topic Provisioning - ensure_topic (lookup, then create-if-absent) and explicit create.

Invariants:
    - Read path is side-effect free: an existing topic is returned unchanged
    - A missing topic is created with provisional_topic_name(key)
    - DuplicateTopicKeyError during provisioning triggers exactly ONE re-read, no more
    - Any other create failure propagates as TopicProvisioningError

Design Decisions:
    - Two explicit steps instead of assuming an atomic upsert: the store only has to
      enforce the (organization, environment, key) unique constraint
    - Re-read on conflict: a concurrent request for the same unseen key created it first,
      so the conflict means "topic now exists", not failure
"""

import logging

from topic_enrollment.core.domain_types import (
    EnvironmentId, OrganizationId, Topic, TopicKey,
)
from topic_enrollment.core.errors import (
    DuplicateTopicKeyError, ErrorContext, TopicEnrollmentError,
    TopicProvisioningError,
)
from topic_enrollment.core.map_links import (
    DEFAULT_PROVISIONAL_PREFIX, provisional_topic_name,
)
from topic_enrollment.core.repository_protocols import TopicRepository

logger = logging.getLogger(__name__)


class TopicProvisioner:
    """Find-or-create for topics keyed by (organization, environment, key)."""

    def __init__(
        self, topics: TopicRepository,
        provisional_prefix: str = DEFAULT_PROVISIONAL_PREFIX,
    ):
        self.topics = topics
        self.provisional_prefix = provisional_prefix

    async def ensure_topic(
        self, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic:
        """Return the topic for key, creating a provisional one when absent."""
        topic = await self.topics.find_topic_by_key(
            key, organization_id, environment_id,
        )
        if topic:
            return topic

        name = provisional_topic_name(key, self.provisional_prefix)
        log_extra = _log_extra(key, organization_id, environment_id)
        try:
            topic = await self.topics.create_topic(
                name, key, organization_id, environment_id,
            )
        except DuplicateTopicKeyError:
            logger.warning(
                f"Topic '{key}' created concurrently, re-reading",
                extra=log_extra,
            )
            return await self._reread_after_conflict(
                key, organization_id, environment_id,
            )
        except TopicEnrollmentError as e:
            raise TopicProvisioningError(
                key, e.message, _context(key, organization_id, environment_id),
            ) from e

        logger.info(f"Provisioned topic '{name}'", extra=log_extra)
        return topic

    async def create_topic(
        self, key: TopicKey, name: str, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic:
        """Explicit creation. DuplicateTopicKeyError reaches the caller."""
        topic = await self.topics.create_topic(
            name, key, organization_id, environment_id,
        )
        logger.info(
            f"Created topic '{name}'",
            extra=_log_extra(key, organization_id, environment_id),
        )
        return topic

    async def _reread_after_conflict(
        self, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic:
        topic = await self.topics.find_topic_by_key(
            key, organization_id, environment_id,
        )
        if not topic:
            raise TopicProvisioningError(
                key, "key conflict reported but topic not readable",
                _context(key, organization_id, environment_id),
            )
        return topic


def _context(
    key: TopicKey, organization_id: OrganizationId, environment_id: EnvironmentId,
) -> ErrorContext:
    return ErrorContext(
        topic_key=key,
        organization_id=str(organization_id),
        environment_id=str(environment_id),
    )


def _log_extra(
    key: TopicKey, organization_id: OrganizationId, environment_id: EnvironmentId,
) -> dict:
    return {
        "topic_key": key,
        "organization_id": str(organization_id),
        "environment_id": str(environment_id),
    }
