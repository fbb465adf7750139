"""API test fixtures - FastAPI test client over the in-memory database.

Invariants:
    - get_db overridden to yield sessions from the test session factory
    - db_manager patched for the readiness probe
    - tenant headers fixture supplies a fresh (organization, environment) pair
"""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from topic_enrollment.infrastructure.database import get_db, DatabaseSessionManager
from topic_enrollment.models.subscriber import Subscriber as SubscriberModel
import topic_enrollment.infrastructure.database as db_module
from topic_enrollment.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def scope():
    return {"organization_id": uuid4(), "environment_id": uuid4()}


@pytest.fixture
def headers(scope):
    return {
        "X-Organization-Id": str(scope["organization_id"]),
        "X-Environment-Id": str(scope["environment_id"]),
    }


@pytest.fixture
def seed_subscribers(test_db, scope):
    async def _seed(*external_ids: str):
        test_db.add_all([
            SubscriberModel(subscriber_id=external_id, **scope)
            for external_id in external_ids
        ])
        await test_db.commit()
    return _seed
