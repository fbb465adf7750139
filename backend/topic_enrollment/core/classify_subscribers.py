"""Subscriber Classification - partitions requested identities against directory results.

Invariants:
    - classify_subscribers is PURE: inputs are never mutated, outputs are fresh
    - External identity string is the canonical key (no object-identity set membership)
    - existing | non_existing covers every requested identity exactly once
    - Duplicate requested identities collapse; duplicate directory records do NOT
      (subscribers_available_to_add keeps every record, in directory order)

Design Decisions:
    - Deduplication of directory records is a separate function: the classifier reports
      what the directory returned, the use case decides what gets written
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from topic_enrollment.core.domain_types import ExternalSubscriberId, Subscriber


@dataclass(frozen=True)
class SubscriberGroups:
    """Three-way split produced by classify_subscribers."""
    existing_external_subscribers: frozenset[ExternalSubscriberId]
    non_existing_external_subscribers: frozenset[ExternalSubscriberId]
    subscribers_available_to_add: tuple[Subscriber, ...]


def classify_subscribers(
    requested: Iterable[ExternalSubscriberId],
    found: Sequence[Subscriber],
) -> SubscriberGroups:
    """Split requested identities into found/not-found. O(len(requested) + len(found))."""
    found_ids = frozenset(s.subscriber_id for s in found)
    return SubscriberGroups(
        existing_external_subscribers=found_ids,
        non_existing_external_subscribers=frozenset(requested) - found_ids,
        subscribers_available_to_add=tuple(found),
    )


def deduplicate_by_external_id(
    subscribers: Sequence[Subscriber],
) -> tuple[tuple[Subscriber, ...], frozenset[ExternalSubscriberId]]:
    """Keep the first record per external identity.

    Returns (unique records in original order, identities that had duplicates).
    """
    seen: set[ExternalSubscriberId] = set()
    duplicated: set[ExternalSubscriberId] = set()
    unique: list[Subscriber] = []
    for subscriber in subscribers:
        if subscriber.subscriber_id in seen:
            duplicated.add(subscriber.subscriber_id)
            continue
        seen.add(subscriber.subscriber_id)
        unique.append(subscriber)
    return tuple(unique), frozenset(duplicated)
