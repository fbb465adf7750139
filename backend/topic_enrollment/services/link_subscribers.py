"""Enrollment Writer - persists one link per eligible subscriber in a single bulk insert.

Invariants:
    - Empty batch: returns without touching the store
    - Failures from the store propagate unchanged (no rollback or retry here)
"""

import logging
from collections.abc import Sequence

from topic_enrollment.core.domain_types import Subscriber, Topic
from topic_enrollment.core.map_links import map_subscribers_to_topic
from topic_enrollment.core.repository_protocols import TopicSubscribersRepository

logger = logging.getLogger(__name__)


class EnrollmentWriter:
    """Bulk writer for topic-subscriber links."""

    def __init__(self, topic_subscribers: TopicSubscribersRepository):
        self.topic_subscribers = topic_subscribers

    async def link_subscribers(
        self, topic: Topic, subscribers: Sequence[Subscriber],
    ) -> None:
        if not subscribers:
            return
        links = map_subscribers_to_topic(topic, subscribers)
        await self.topic_subscribers.add_subscribers(links)
        logger.debug(
            f"Linked {len(links)} subscriber(s) to topic '{topic.key}'",
            extra={"topic_key": topic.key, "enrolled_count": len(links)},
        )
