"""Topic Schemas - Pydantic models with field-level validation for API boundaries.

Invariants:
    - AddSubscribersRequest.subscribers: at least one id, each stripped and non-empty
    - Upper bound on subscribers is settings.max_subscribers_per_request (checked in route)
    - Response identity lists are sorted for stable output

Design Decisions:
    - Duplicates in subscribers are accepted here; the use case collapses them
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


TOPIC_KEY_PATTERN = r"^[A-Za-z0-9_.:-]+$"


class TopicCreate(BaseModel):
    """Explicit topic creation."""
    key: str = Field(min_length=1, max_length=255, pattern=TOPIC_KEY_PATTERN)
    name: str = Field(min_length=1, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class TopicResponse(BaseModel):
    id: UUID
    key: str
    name: str


class AddSubscribersRequest(BaseModel):
    """External subscriber ids to enroll into a topic."""
    subscribers: list[str] = Field(min_length=1)

    @field_validator("subscribers")
    @classmethod
    def strip_subscribers(cls, v: list[str]) -> list[str]:
        stripped = [s.strip() for s in v]
        if any(not s for s in stripped):
            raise ValueError("subscriber ids cannot be empty or whitespace")
        if any(len(s) > 255 for s in stripped):
            raise ValueError("subscriber ids are limited to 255 characters")
        return stripped


class AddSubscribersResponse(BaseModel):
    """Classification of the requested ids."""
    existing_external_subscribers: list[str]
    non_existing_external_subscribers: list[str]
