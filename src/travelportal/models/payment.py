"""Payment records and card details accepted by the payment flow."""

from __future__ import annotations

import enum
import re
from datetime import date
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from travelportal._constants import DEFAULT_PAYMENT_METHOD
from travelportal.models._base import PortalRecord, PortalUpdate


class PaymentStatus(enum.StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(PortalRecord):
    """A payment made for one booking."""

    IDENTITY_FIELD: ClassVar[str] = "payment_id"

    payment_id: int = Field(alias="PaymentID")
    user_id: int = Field(alias="UserID")
    booking_id: int = Field(alias="BookingID")
    amount: float = Field(ge=0)
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str = DEFAULT_PAYMENT_METHOD


class PaymentUpdate(PortalUpdate):
    user_id: int | None = Field(default=None, alias="UserID")
    booking_id: int | None = Field(default=None, alias="BookingID")
    amount: float | None = Field(default=None, ge=0)
    status: PaymentStatus | None = None
    payment_method: str | None = None


# ------------------------------------------------------------------
# Card details
# ------------------------------------------------------------------

_CARD_NUMBER_RE = re.compile(r"^\d{4} \d{4} \d{4} \d{4}$")
_EXPIRY_RE = re.compile(r"^(\d{2})/(\d{2})$")
_CVV_RE = re.compile(r"^\d{3,4}$")
_HOLDER_RE = re.compile(r"^[a-zA-Z ]{2,50}$")


class CardDetails(BaseModel):
    """Card fields as entered in the payment form.

    Format checks run at construction. Expiry against the current date is
    checked separately via :meth:`is_expired` so callers control the clock.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    card_number: str = Field(repr=False)
    """``XXXX XXXX XXXX XXXX``."""
    expiry_date: str
    """``MM/YY``."""
    cvv: str = Field(repr=False)
    cardholder_name: str

    @field_validator("card_number")
    @classmethod
    def _check_card_number(cls, value: str) -> str:
        if not _CARD_NUMBER_RE.match(value):
            raise ValueError("card number must be in format XXXX XXXX XXXX XXXX")
        return value

    @field_validator("expiry_date")
    @classmethod
    def _check_expiry(cls, value: str) -> str:
        match = _EXPIRY_RE.match(value)
        if match is None:
            raise ValueError("expiry date must be in format MM/YY")
        if not 1 <= int(match.group(1)) <= 12:
            raise ValueError("expiry month must be between 01 and 12")
        return value

    @field_validator("cvv")
    @classmethod
    def _check_cvv(cls, value: str) -> str:
        if not _CVV_RE.match(value):
            raise ValueError("CVV must be 3-4 digits")
        return value

    @field_validator("cardholder_name")
    @classmethod
    def _check_holder(cls, value: str) -> str:
        if not _HOLDER_RE.match(value):
            raise ValueError("cardholder name must be 2-50 characters, letters and spaces only")
        return value

    @property
    def expires_on(self) -> date:
        """First day of the expiry month."""
        month, year = self.expiry_date.split("/")
        return date(2000 + int(year), int(month), 1)

    def is_expired(self, today: date) -> bool:
        """Expired from the first day of the expiry month onwards."""
        return self.expires_on <= today

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]
