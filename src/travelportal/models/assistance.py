"""Customer assistance (support) requests."""

from __future__ import annotations

import enum
from typing import ClassVar

from pydantic import Field

from travelportal.models._base import (
    OptionalTimestamp,
    PortalRecord,
    PortalTimestamp,
    PortalUpdate,
    utcnow,
)


class Priority(enum.StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssistanceStatus(enum.StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AssistanceRequest(PortalRecord):
    """A support request raised by a user and triaged by admins."""

    IDENTITY_FIELD: ClassVar[str] = "request_id"

    request_id: int = Field(alias="RequestID")
    user_id: int = Field(alias="UserID")
    issue_description: str
    priority: Priority = Priority.MEDIUM
    status: AssistanceStatus = AssistanceStatus.PENDING
    resolution_time: OptionalTimestamp = None
    """Set when the request is completed."""
    timestamp: PortalTimestamp = Field(default_factory=utcnow)

    @property
    def is_open(self) -> bool:
        return self.status != AssistanceStatus.COMPLETED


class AssistanceRequestUpdate(PortalUpdate):
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"resolution_time"})

    issue_description: str | None = None
    priority: Priority | None = None
    status: AssistanceStatus | None = None
    resolution_time: OptionalTimestamp = None
