"""Package review model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from travelportal.models._base import PortalRecord, PortalTimestamp, PortalUpdate, utcnow


class Review(PortalRecord):
    IDENTITY_FIELD: ClassVar[str] = "review_id"

    review_id: int = Field(alias="ReviewID")
    user_id: int = Field(alias="UserID")
    package_id: int = Field(alias="PackageID")
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    timestamp: PortalTimestamp = Field(default_factory=utcnow)


class ReviewUpdate(PortalUpdate):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = None
