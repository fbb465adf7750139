"""Domain Types - identity wrappers and immutable value objects for topic enrollment.

Invariants:
    - OrganizationId, EnvironmentId, TopicId, SubscriberId wrap UUIDs
    - TopicKey and ExternalSubscriberId wrap tenant-supplied strings
    - Topic, Subscriber, EnrollmentLink are frozen: the core never mutates records
    - ORM rows never cross into core/ (infrastructure converts them to these types)

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - Frozen dataclasses for records: hashable, comparable by value, safe to share
"""

from dataclasses import dataclass
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OrganizationId = NewType("OrganizationId", UUID)
EnvironmentId = NewType("EnvironmentId", UUID)
TopicId = NewType("TopicId", UUID)
SubscriberId = NewType("SubscriberId", UUID)

TopicKey = NewType("TopicKey", str)
ExternalSubscriberId = NewType("ExternalSubscriberId", str)


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Topic:
    """Broadcast group, unique by key within (organization, environment)."""
    id: TopicId
    organization_id: OrganizationId
    environment_id: EnvironmentId
    key: TopicKey
    name: str


@dataclass(frozen=True)
class Subscriber:
    """Directory entry. subscriber_id is the external identity string."""
    id: SubscriberId
    organization_id: OrganizationId
    environment_id: EnvironmentId
    subscriber_id: ExternalSubscriberId


@dataclass(frozen=True)
class EnrollmentLink:
    """Subscriber-topic association as persisted by the link store."""
    organization_id: OrganizationId
    environment_id: EnvironmentId
    subscriber_id: SubscriberId
    topic_id: TopicId
    topic_key: TopicKey
    external_subscriber_id: ExternalSubscriberId


# ─── Use-case IO ─────────────────────────────────────────────────

@dataclass(frozen=True)
class EnrollmentRequest:
    """Input of the add-subscribers use case. subscribers may contain duplicates."""
    topic_key: TopicKey
    organization_id: OrganizationId
    environment_id: EnvironmentId
    subscribers: tuple[ExternalSubscriberId, ...]


@dataclass(frozen=True)
class EnrollmentResult:
    existing_external_subscribers: frozenset[ExternalSubscriberId]
    non_existing_external_subscribers: frozenset[ExternalSubscriberId]
