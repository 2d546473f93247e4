"""Booking model."""

from __future__ import annotations

import enum
from datetime import date
from typing import ClassVar

from pydantic import Field

from travelportal.models._base import PortalRecord, PortalUpdate


class BookingStatus(enum.StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(PortalRecord):
    """A customer's booking of a package.

    ``payment_id`` is set once the booking has been paid for; a booking
    references at most one payment.
    """

    IDENTITY_FIELD: ClassVar[str] = "booking_id"

    booking_id: int = Field(alias="BookingID")
    user_id: int = Field(alias="UserID")
    package_id: int = Field(alias="PackageID")
    start_date: date
    end_date: date
    status: BookingStatus = BookingStatus.PENDING
    payment_id: int | None = Field(default=None, alias="PaymentID")

    @property
    def is_paid(self) -> bool:
        return self.payment_id is not None

    @property
    def nights(self) -> int:
        return max(0, (self.end_date - self.start_date).days)


class BookingUpdate(PortalUpdate):
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"payment_id"})

    user_id: int | None = Field(default=None, alias="UserID")
    package_id: int | None = Field(default=None, alias="PackageID")
    start_date: date | None = None
    end_date: date | None = None
    status: BookingStatus | None = None
    payment_id: int | None = Field(default=None, alias="PaymentID")
