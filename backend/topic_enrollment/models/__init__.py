"""ORM Models - SQLAlchemy declarative models for topics, subscribers and links.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table is scoped by (organization_id, environment_id)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from topic_enrollment.models.topic import Topic  # noqa: F401
from topic_enrollment.models.subscriber import Subscriber  # noqa: F401
from topic_enrollment.models.topic_subscriber import TopicSubscriber  # noqa: F401
