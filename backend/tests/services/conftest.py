"""Service test fixtures - in-memory collaborators behind the repository Protocols.

Invariants:
    - FakeTopicRepository records every call so tests can assert read/create counts
    - directory / link_store are AsyncMocks: tests set return_value / side_effect
    - No database; services are exercised against the Protocol contracts only
"""

from uuid import uuid4

import pytest
from unittest.mock import AsyncMock

from topic_enrollment.core.domain_types import Subscriber, Topic
from topic_enrollment.core.errors import DuplicateTopicKeyError
from topic_enrollment.services.add_subscribers import AddSubscribers
from topic_enrollment.services.link_subscribers import EnrollmentWriter
from topic_enrollment.services.provision_topic import TopicProvisioner


class FakeTopicRepository:
    """Dict-backed TopicRepository.

    race_winner: when set, the first create_topic call stores this topic and
    raises DuplicateTopicKeyError, as if a concurrent request created it first.
    """

    def __init__(self):
        self.topics: dict[tuple, Topic] = {}
        self.find_calls = 0
        self.create_calls = 0
        self.race_winner: Topic | None = None
        self.create_error: Exception | None = None

    async def find_topic_by_key(self, key, organization_id, environment_id):
        self.find_calls += 1
        return self.topics.get((organization_id, environment_id, key))

    async def create_topic(self, name, key, organization_id, environment_id):
        self.create_calls += 1
        scope = (organization_id, environment_id, key)
        if self.create_error:
            raise self.create_error
        if self.race_winner:
            self.topics[scope] = self.race_winner
            raise DuplicateTopicKeyError(key)
        if scope in self.topics:
            raise DuplicateTopicKeyError(key)
        topic = Topic(
            id=uuid4(), organization_id=organization_id,
            environment_id=environment_id, key=key, name=name,
        )
        self.topics[scope] = topic
        return topic


@pytest.fixture
def org_id():
    return uuid4()


@pytest.fixture
def env_id():
    return uuid4()


@pytest.fixture
def make_subscriber(org_id, env_id):
    def _make(external_id: str) -> Subscriber:
        return Subscriber(
            id=uuid4(), organization_id=org_id, environment_id=env_id,
            subscriber_id=external_id,
        )
    return _make


@pytest.fixture
def topic_repo():
    return FakeTopicRepository()


@pytest.fixture
def directory():
    mock = AsyncMock()
    mock.search_by_external_subscriber_ids.return_value = []
    return mock


@pytest.fixture
def link_store():
    return AsyncMock()


@pytest.fixture
def provisioner(topic_repo):
    return TopicProvisioner(topic_repo)


@pytest.fixture
def use_case(provisioner, directory, link_store):
    return AddSubscribers(
        provisioner=provisioner,
        directory=directory,
        writer=EnrollmentWriter(link_store),
    )
