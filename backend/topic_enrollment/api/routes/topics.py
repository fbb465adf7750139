"""Topic Routes - explicit topic creation, lookup, and subscriber enrollment.

Invariants:
    - Tenant scope comes from X-Organization-Id / X-Environment-Id headers (UUIDs)
    - Routes build services from the request's AsyncSession and delegate; no business logic here
    - Enrollment response lists are sorted

Design Decisions:
    - Headers over path params for tenant scope: authentication (out of scope) would
      resolve the same two ids and replace get_tenant_scope
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from topic_enrollment.config import Settings, get_settings
from topic_enrollment.core.domain_types import (
    EnrollmentRequest, EnvironmentId, ExternalSubscriberId, OrganizationId,
    Topic, TopicKey,
)
from topic_enrollment.core.errors import (
    BatchTooLargeError, ErrorContext, ResourceNotFoundError,
)
from topic_enrollment.infrastructure.database import get_db
from topic_enrollment.infrastructure.subscriber_directory import SqlSubscriberDirectory
from topic_enrollment.infrastructure.topic_store import SqlTopicRepository
from topic_enrollment.infrastructure.topic_subscribers_store import (
    SqlTopicSubscribersRepository,
)
from topic_enrollment.schemas.topic import (
    TOPIC_KEY_PATTERN, AddSubscribersRequest, AddSubscribersResponse,
    TopicCreate, TopicResponse,
)
from topic_enrollment.services.add_subscribers import AddSubscribers
from topic_enrollment.services.link_subscribers import EnrollmentWriter
from topic_enrollment.services.provision_topic import TopicProvisioner

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/topics", tags=["topics"])


@dataclass(frozen=True)
class TenantScope:
    organization_id: OrganizationId
    environment_id: EnvironmentId


def get_tenant_scope(
    x_organization_id: UUID = Header(...),
    x_environment_id: UUID = Header(...),
) -> TenantScope:
    return TenantScope(
        OrganizationId(x_organization_id), EnvironmentId(x_environment_id),
    )


def _provisioner(db: AsyncSession, settings: Settings) -> TopicProvisioner:
    return TopicProvisioner(
        SqlTopicRepository(db),
        provisional_prefix=settings.provisional_topic_prefix,
    )


def _topic_response(topic: Topic) -> TopicResponse:
    return TopicResponse(id=topic.id, key=topic.key, name=topic.name)


@router.post(
    "", response_model=TopicResponse, status_code=status.HTTP_201_CREATED,
)
async def create_topic(
    body: TopicCreate,
    scope: TenantScope = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a topic with an explicit name. 409 if the key exists."""
    topic = await _provisioner(db, settings).create_topic(
        TopicKey(body.key), body.name,
        scope.organization_id, scope.environment_id,
    )
    return _topic_response(topic)


@router.get("/{topic_key}", response_model=TopicResponse)
async def get_topic(
    topic_key: str = Path(min_length=1, max_length=255, pattern=TOPIC_KEY_PATTERN),
    scope: TenantScope = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    topic = await SqlTopicRepository(db).find_topic_by_key(
        TopicKey(topic_key), scope.organization_id, scope.environment_id,
    )
    if not topic:
        raise ResourceNotFoundError(
            "Topic", topic_key,
            ErrorContext(
                topic_key=topic_key,
                organization_id=str(scope.organization_id),
                environment_id=str(scope.environment_id),
            ),
        )
    return _topic_response(topic)


@router.post(
    "/{topic_key}/subscribers", response_model=AddSubscribersResponse,
)
async def add_subscribers(
    body: AddSubscribersRequest,
    # same key rules as TopicCreate.key, so provisional topics stay creatable explicitly
    topic_key: str = Path(min_length=1, max_length=255, pattern=TOPIC_KEY_PATTERN),
    scope: TenantScope = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Enroll subscribers into a topic, provisioning the topic if needed."""
    if len(body.subscribers) > settings.max_subscribers_per_request:
        raise BatchTooLargeError(
            len(body.subscribers), settings.max_subscribers_per_request,
            ErrorContext(
                topic_key=topic_key,
                organization_id=str(scope.organization_id),
                environment_id=str(scope.environment_id),
            ),
        )

    use_case = AddSubscribers(
        provisioner=_provisioner(db, settings),
        directory=SqlSubscriberDirectory(db),
        writer=EnrollmentWriter(SqlTopicSubscribersRepository(db)),
        deduplicate_directory_results=settings.deduplicate_directory_results,
    )
    result = await use_case.execute(EnrollmentRequest(
        topic_key=TopicKey(topic_key),
        organization_id=scope.organization_id,
        environment_id=scope.environment_id,
        subscribers=tuple(ExternalSubscriberId(s) for s in body.subscribers),
    ))
    return AddSubscribersResponse(
        existing_external_subscribers=sorted(
            result.existing_external_subscribers,
        ),
        non_existing_external_subscribers=sorted(
            result.non_existing_external_subscribers,
        ),
    )
