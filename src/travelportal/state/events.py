"""Change notifications published by the domain store.

Every mutation emits one :class:`ChangeEvent` carrying the new immutable
snapshot of the affected collection. Subscribers re-derive their view from
the snapshot; there is no diffing.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CollectionName(StrEnum):
    USERS = "users"
    TRAVEL_PACKAGES = "travelPackages"
    BOOKINGS = "bookings"
    PAYMENTS = "payments"
    REVIEWS = "reviews"
    INSURANCE = "insurance"
    ASSISTANCE_REQUESTS = "assistanceRequests"


class ChangeAction(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"
    REPLACED = "replaced"


class ChangeEvent(BaseModel):
    """A published collection change."""

    model_config = ConfigDict(frozen=True)

    collection: CollectionName
    action: ChangeAction
    record_id: int | None = Field(
        default=None,
        description="Identity of the affected record; None for wholesale replacement.",
    )
    snapshot: tuple[Any, ...] = Field(default=(), description="Collection contents after the change")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
