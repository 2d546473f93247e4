"""Data models for portal records."""

from travelportal.models._base import (
    PortalRecord,
    PortalTimestamp,
    PortalUpdate,
    parse_timestamp,
)
from travelportal.models.assistance import (
    AssistanceRequest,
    AssistanceRequestUpdate,
    AssistanceStatus,
    Priority,
)
from travelportal.models.booking import Booking, BookingStatus, BookingUpdate
from travelportal.models.insurance import Insurance
from travelportal.models.package import TravelPackage, TravelPackageUpdate
from travelportal.models.payment import CardDetails, Payment, PaymentStatus, PaymentUpdate
from travelportal.models.review import Review, ReviewUpdate
from travelportal.models.statistics import PortalStatistics
from travelportal.models.user import Approval, ProfileUpdate, Role, User, UserUpdate

__all__ = [
    "Approval",
    "AssistanceRequest",
    "AssistanceRequestUpdate",
    "AssistanceStatus",
    "Booking",
    "BookingStatus",
    "BookingUpdate",
    "CardDetails",
    "Insurance",
    "Payment",
    "PaymentStatus",
    "PaymentUpdate",
    "PortalRecord",
    "PortalStatistics",
    "PortalTimestamp",
    "PortalUpdate",
    "Priority",
    "ProfileUpdate",
    "Review",
    "ReviewUpdate",
    "Role",
    "TravelPackage",
    "TravelPackageUpdate",
    "User",
    "UserUpdate",
    "parse_timestamp",
]
