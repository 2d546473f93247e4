"""Custom exception hierarchy for travelportal."""

from __future__ import annotations


class PortalError(Exception):
    """Base exception for all travelportal errors."""


class PortalConfigError(PortalError):
    """Invalid or missing configuration."""


class StorageError(PortalError):
    """Durable storage could not be written."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class BookingError(PortalError):
    """A booking workflow precondition failed.

    Raised for unknown bookings or packages, invalid date ranges, paying
    for a booking twice, or cancelling inside the notice window.
    """

    def __init__(self, message: str, *, booking_id: int | None = None) -> None:
        self.booking_id = booking_id
        super().__init__(message)


class PaymentValidationError(PortalError):
    """Card details were rejected before a payment was recorded."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class ProfileUpdateError(PortalError):
    """Profile update rejected (e.g. password confirmation mismatch)."""
