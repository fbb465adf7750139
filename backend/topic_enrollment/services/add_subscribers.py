"""Add Subscribers - the enrollment use case: provision topic, classify, write links.

Invariants:
    - Sequence is fixed: ensure_topic -> directory search -> classify -> link (if non-empty)
    - Writer is never invoked with an empty batch
    - Only the two identity sets are returned; subscriber records stay internal
    - Collaborator errors propagate; LinkWriteError is enriched with the
      classification before re-raising

Design Decisions:
    - Impureim sandwich: async IO around the pure classify_subscribers/deduplicate calls
    - Directory duplicates (several records for one external identity) are collapsed
      before writing when deduplicate_directory_results is on (default), so a
      data-quality problem upstream does not turn into duplicate link rows
"""

import logging

from topic_enrollment.core.classify_subscribers import (
    classify_subscribers, deduplicate_by_external_id,
)
from topic_enrollment.core.domain_types import EnrollmentRequest, EnrollmentResult
from topic_enrollment.core.errors import LinkWriteError
from topic_enrollment.core.repository_protocols import SubscriberDirectory
from topic_enrollment.services.link_subscribers import EnrollmentWriter
from topic_enrollment.services.provision_topic import TopicProvisioner

logger = logging.getLogger(__name__)


class AddSubscribers:
    """Enroll external subscriber identities into a topic."""

    def __init__(
        self,
        provisioner: TopicProvisioner,
        directory: SubscriberDirectory,
        writer: EnrollmentWriter,
        deduplicate_directory_results: bool = True,
    ):
        self.provisioner = provisioner
        self.directory = directory
        self.writer = writer
        self.deduplicate_directory_results = deduplicate_directory_results

    async def execute(self, request: EnrollmentRequest) -> EnrollmentResult:
        topic = await self.provisioner.ensure_topic(
            request.topic_key, request.organization_id, request.environment_id,
        )

        found = await self.directory.search_by_external_subscriber_ids(
            list(request.subscribers),
            request.organization_id,
            request.environment_id,
        )
        groups = classify_subscribers(request.subscribers, found)

        to_add = groups.subscribers_available_to_add
        if self.deduplicate_directory_results:
            to_add, duplicated = deduplicate_by_external_id(to_add)
            if duplicated:
                logger.warning(
                    f"Directory returned duplicate records for: {sorted(duplicated)}",
                    extra={"topic_key": request.topic_key},
                )

        if to_add:
            try:
                await self.writer.link_subscribers(topic, to_add)
            except LinkWriteError as e:
                e.existing_external_subscribers = groups.existing_external_subscribers
                e.non_existing_external_subscribers = (
                    groups.non_existing_external_subscribers
                )
                raise

        logger.info(
            f"Enrollment into '{request.topic_key}' processed",
            extra={
                "topic_key": request.topic_key,
                "organization_id": str(request.organization_id),
                "environment_id": str(request.environment_id),
                "existing_count": len(groups.existing_external_subscribers),
                "enrolled_count": len(to_add),
                "not_found_count": len(groups.non_existing_external_subscribers),
            },
        )
        return EnrollmentResult(
            existing_external_subscribers=groups.existing_external_subscribers,
            non_existing_external_subscribers=(
                groups.non_existing_external_subscribers
            ),
        )
