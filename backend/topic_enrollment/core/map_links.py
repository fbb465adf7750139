"""Link Mapping - builds enrollment links and provisional topic names.

Invariants:
    - One EnrollmentLink per input subscriber, same order
    - Tenant scope comes from the subscriber record; topic id/key from the topic
"""

from collections.abc import Sequence

from topic_enrollment.core.domain_types import (
    EnrollmentLink, Subscriber, Topic, TopicKey,
)


DEFAULT_PROVISIONAL_PREFIX: str = "Topic-On-The-Fly-"


def provisional_topic_name(
    key: TopicKey, prefix: str = DEFAULT_PROVISIONAL_PREFIX,
) -> str:
    """Deterministic display name for a topic created on first reference."""
    return f"{prefix}{key}"


def map_subscribers_to_topic(
    topic: Topic, subscribers: Sequence[Subscriber],
) -> list[EnrollmentLink]:
    return [
        EnrollmentLink(
            organization_id=subscriber.organization_id,
            environment_id=subscriber.environment_id,
            subscriber_id=subscriber.id,
            topic_id=topic.id,
            topic_key=topic.key,
            external_subscriber_id=subscriber.subscriber_id,
        )
        for subscriber in subscribers
    ]
