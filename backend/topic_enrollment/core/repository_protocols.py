"""Boundary Protocols - contracts between the enrollment core and its storage collaborators.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by infrastructure/ via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass AsyncMock fakes without inheritance
    - Async in Protocol: implementations do IO, but the pure functions that consume
      their results (classify_subscribers, map_subscribers_to_topic) are never async
"""

from collections.abc import Sequence
from typing import Protocol

from topic_enrollment.core.domain_types import (
    EnrollmentLink, EnvironmentId, ExternalSubscriberId, OrganizationId,
    Subscriber, Topic, TopicKey,
)


class TopicRepository(Protocol):
    """Keyed lookup and creation of topics."""
    async def find_topic_by_key(
        self, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic | None: ...

    async def create_topic(
        self, name: str, key: TopicKey, organization_id: OrganizationId,
        environment_id: EnvironmentId,
    ) -> Topic:
        """Raises DuplicateTopicKeyError when the key exists in scope."""
        ...


class SubscriberDirectory(Protocol):
    """Read-only subscriber lookup.

    Returns matches only and silently omits unmatched identities. May return
    several records for one external identity.
    """
    async def search_by_external_subscriber_ids(
        self, external_subscriber_ids: Sequence[ExternalSubscriberId],
        organization_id: OrganizationId, environment_id: EnvironmentId,
    ) -> list[Subscriber]: ...


class TopicSubscribersRepository(Protocol):
    """Bulk persistence of enrollment links."""
    async def add_subscribers(self, links: Sequence[EnrollmentLink]) -> None: ...
