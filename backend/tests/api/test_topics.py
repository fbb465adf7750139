"""Topic Routes - enrollment, explicit creation and lookup over HTTP.

Tests cover:
    - Enrollment returns sorted existing / non-existing lists and writes links
    - Unknown topic key provisioned with the on-the-fly name
    - Re-enrolling reuses the same topic
    - Missing tenant headers and empty subscriber lists rejected with 400
    - Over-limit batch rejected with the VALIDATION_ERROR envelope
    - Re-enrolling the same subscriber keeps one link row
    - Topic keys on the path follow the TopicCreate.key rules
    - Explicit create 201 / 409, lookup 200 / 404
"""

from sqlalchemy import func, select

from topic_enrollment.config import Settings, get_settings
from topic_enrollment.main import app
from topic_enrollment.models.topic import Topic as TopicModel
from topic_enrollment.models.topic_subscriber import TopicSubscriber


async def _count(test_db, model) -> int:
    result = await test_db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# ─── POST /topics/{key}/subscribers ─────────────────────────────

async def test_enroll_classifies_and_links(client, headers, seed_subscribers, test_db):
    await seed_subscribers("a", "c")

    res = await client.post(
        "/api/v1/topics/news/subscribers",
        json={"subscribers": ["c", "b", "a", "a"]},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json() == {
        "existing_external_subscribers": ["a", "c"],
        "non_existing_external_subscribers": ["b"],
    }
    assert await _count(test_db, TopicSubscriber) == 2


async def test_enroll_provisions_unknown_topic(client, headers, test_db):
    res = await client.post(
        "/api/v1/topics/fresh/subscribers",
        json={"subscribers": ["x", "x", "y"]},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["non_existing_external_subscribers"] == ["x", "y"]
    assert await _count(test_db, TopicSubscriber) == 0

    topic = await client.get("/api/v1/topics/fresh", headers=headers)
    assert topic.status_code == 200
    assert topic.json()["name"] == "Topic-On-The-Fly-fresh"


async def test_enroll_twice_reuses_topic(client, headers, seed_subscribers, test_db):
    await seed_subscribers("a")
    for _ in range(2):
        res = await client.post(
            "/api/v1/topics/news/subscribers",
            json={"subscribers": ["a"]}, headers=headers,
        )
        assert res.status_code == 200

    assert await _count(test_db, TopicModel) == 1
    assert await _count(test_db, TopicSubscriber) == 1


async def test_enroll_requires_tenant_headers(client):
    res = await client.post(
        "/api/v1/topics/news/subscribers", json={"subscribers": ["a"]},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_enroll_rejects_empty_list(client, headers):
    res = await client.post(
        "/api/v1/topics/news/subscribers", json={"subscribers": []},
        headers=headers,
    )
    assert res.status_code == 400


async def test_enroll_rejects_blank_ids(client, headers):
    res = await client.post(
        "/api/v1/topics/news/subscribers", json={"subscribers": ["a", "  "]},
        headers=headers,
    )
    assert res.status_code == 400


async def test_enroll_rejects_oversized_batch(client, headers):
    app.dependency_overrides[get_settings] = lambda: Settings(
        max_subscribers_per_request=2,
    )
    res = await client.post(
        "/api/v1/topics/news/subscribers",
        json={"subscribers": ["a", "b", "c"]}, headers=headers,
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert error["context"]["topic_key"] == "news"


# ─── POST /topics, GET /topics/{key} ────────────────────────────

async def test_create_topic_then_conflict(client, headers):
    body = {"key": "weekly", "name": "Weekly Digest"}

    created = await client.post("/api/v1/topics", json=body, headers=headers)
    conflict = await client.post("/api/v1/topics", json=body, headers=headers)

    assert created.status_code == 201
    assert created.json()["name"] == "Weekly Digest"
    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "TOPIC_KEY_CONFLICT"


async def test_explicit_topic_keeps_name_on_enroll(client, headers):
    await client.post(
        "/api/v1/topics", json={"key": "weekly", "name": "Weekly Digest"},
        headers=headers,
    )
    await client.post(
        "/api/v1/topics/weekly/subscribers", json={"subscribers": ["a"]},
        headers=headers,
    )

    res = await client.get("/api/v1/topics/weekly", headers=headers)
    assert res.json()["name"] == "Weekly Digest"


async def test_get_missing_topic_returns_404(client, headers):
    res = await client.get("/api/v1/topics/nope", headers=headers)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_create_topic_validates_key(client, headers):
    res = await client.post(
        "/api/v1/topics", json={"key": "has space", "name": "X"},
        headers=headers,
    )
    assert res.status_code == 400


async def test_enroll_retry_keeps_one_link_per_subscriber(
    client, headers, seed_subscribers, test_db,
):
    await seed_subscribers("a", "b")
    await client.post(
        "/api/v1/topics/news/subscribers", json={"subscribers": ["a"]},
        headers=headers,
    )

    res = await client.post(
        "/api/v1/topics/news/subscribers", json={"subscribers": ["a", "b"]},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["existing_external_subscribers"] == ["a", "b"]
    assert await _count(test_db, TopicSubscriber) == 2


async def test_enroll_rejects_key_that_explicit_create_rejects(client, headers, test_db):
    res = await client.post(
        "/api/v1/topics/has%20space/subscribers", json={"subscribers": ["a"]},
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert await _count(test_db, TopicModel) == 0


async def test_enroll_rejects_overlong_key(client, headers, test_db):
    res = await client.post(
        f"/api/v1/topics/{'k' * 256}/subscribers", json={"subscribers": ["a"]},
        headers=headers,
    )

    assert res.status_code == 400
    assert await _count(test_db, TopicModel) == 0


async def test_get_topic_rejects_invalid_key(client, headers):
    res = await client.get("/api/v1/topics/has%20space", headers=headers)
    assert res.status_code == 400
