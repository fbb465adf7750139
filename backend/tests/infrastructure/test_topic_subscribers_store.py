"""Topic Subscribers Store - bulk link insert and failure mapping."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from topic_enrollment.core.domain_types import EnrollmentLink
from topic_enrollment.core.errors import LinkWriteError
from topic_enrollment.infrastructure.topic_store import SqlTopicRepository
from topic_enrollment.infrastructure.topic_subscribers_store import (
    SqlTopicSubscribersRepository,
)
from topic_enrollment.models.topic_subscriber import TopicSubscriber


def _links_for(topic, rows, org_id, env_id) -> list[EnrollmentLink]:
    return [
        EnrollmentLink(
            organization_id=org_id, environment_id=env_id,
            subscriber_id=row.id, topic_id=topic.id,
            topic_key=topic.key, external_subscriber_id=row.subscriber_id,
        )
        for row in rows
    ]


async def test_inserts_all_links(test_db, seed_subscribers, org_id, env_id):
    rows = await seed_subscribers("a", "b")
    topic = await SqlTopicRepository(test_db).create_topic("News", "news", org_id, env_id)
    links = _links_for(topic, rows, org_id, env_id)

    await SqlTopicSubscribersRepository(test_db).add_subscribers(links)

    result = await test_db.execute(
        select(TopicSubscriber).where(TopicSubscriber.topic_id == topic.id),
    )
    stored = result.scalars().all()
    assert sorted(s.external_subscriber_id for s in stored) == ["a", "b"]
    assert all(s.topic_key == "news" for s in stored)


async def test_insert_failure_is_link_write_error():
    bind = MagicMock()
    bind.dialect.name = "sqlite"
    db = AsyncMock()
    db.get_bind = MagicMock(return_value=bind)
    db.execute.side_effect = OperationalError("INSERT", {}, Exception("gone"))
    link = EnrollmentLink(
        organization_id=uuid4(), environment_id=uuid4(),
        subscriber_id=uuid4(), topic_id=uuid4(),
        topic_key="news", external_subscriber_id="a",
    )

    with pytest.raises(LinkWriteError) as exc_info:
        await SqlTopicSubscribersRepository(db).add_subscribers([link])

    assert exc_info.value.link_count == 1
    assert exc_info.value.context.topic_key == "news"
    db.rollback.assert_awaited_once()


async def test_existing_links_are_skipped(test_db, seed_subscribers, org_id, env_id):
    first, second = await seed_subscribers("a", "b")
    topic = await SqlTopicRepository(test_db).create_topic("News", "news", org_id, env_id)
    store = SqlTopicSubscribersRepository(test_db)

    await store.add_subscribers(_links_for(topic, [first], org_id, env_id))
    await store.add_subscribers(_links_for(topic, [first, second], org_id, env_id))

    result = await test_db.execute(
        select(TopicSubscriber).where(TopicSubscriber.topic_id == topic.id),
    )
    stored = result.scalars().all()
    assert sorted(s.external_subscriber_id for s in stored) == ["a", "b"]


async def test_same_subscriber_may_join_several_topics(test_db, seed_subscribers, org_id, env_id):
    [row] = await seed_subscribers("a")
    repo = SqlTopicRepository(test_db)
    news = await repo.create_topic("News", "news", org_id, env_id)
    alerts = await repo.create_topic("Alerts", "alerts", org_id, env_id)
    store = SqlTopicSubscribersRepository(test_db)

    await store.add_subscribers(_links_for(news, [row], org_id, env_id))
    await store.add_subscribers(_links_for(alerts, [row], org_id, env_id))

    result = await test_db.execute(
        select(TopicSubscriber).where(TopicSubscriber.subscriber_id == row.id),
    )
    assert {s.topic_key for s in result.scalars().all()} == {"news", "alerts"}


async def test_empty_batch_is_a_no_op():
    db = AsyncMock()
    await SqlTopicSubscribersRepository(db).add_subscribers([])
    db.execute.assert_not_awaited()
    db.commit.assert_not_awaited()
