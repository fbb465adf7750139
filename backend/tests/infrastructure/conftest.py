"""Infrastructure fixtures - seeded subscriber rows."""

from uuid import uuid4

import pytest

from topic_enrollment.models.subscriber import Subscriber as SubscriberModel


@pytest.fixture
def org_id():
    return uuid4()


@pytest.fixture
def env_id():
    return uuid4()


@pytest.fixture
def seed_subscribers(test_db, org_id, env_id):
    """Insert subscriber rows; returns the ORM objects."""
    async def _seed(*external_ids: str, organization_id=None, environment_id=None):
        rows = [
            SubscriberModel(
                organization_id=organization_id or org_id,
                environment_id=environment_id or env_id,
                subscriber_id=external_id,
            )
            for external_id in external_ids
        ]
        test_db.add_all(rows)
        await test_db.commit()
        return rows
    return _seed
