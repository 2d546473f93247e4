"""Seed data for the domain store.

The store treats a :class:`SeedData` as an opaque initial value; it copies
the records and never writes back. Fixtures use the PascalCase keys of the
stored record shape.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from travelportal.exceptions import PortalConfigError

_logger = logging.getLogger(__name__)

Rows = tuple[Mapping[str, Any], ...]

DEFAULT_USERS: Rows = (
    {
        "UserID": 1,
        "Name": "Admin User",
        "Email": "admin@travel.com",
        "Password": "admin123",
        "Role": "admin",
        "ContactNumber": "+1-555-0100",
        "Approval": "approved",
        "RegistrationDate": "2024-01-01T00:00:00Z",
    },
    {
        "UserID": 2,
        "Name": "Sarah Johnson",
        "Email": "sarah@travel.com",
        "Password": "agent123",
        "Role": "agent",
        "ContactNumber": "+1-555-0101",
        "Approval": "approved",
        "RegistrationDate": "2024-01-15T09:30:00Z",
    },
    {
        "UserID": 3,
        "Name": "Michael Chen",
        "Email": "michael@travel.com",
        "Password": "agent456",
        "Role": "agent",
        "ContactNumber": "+1-555-0102",
        "Approval": "pending",
        "RegistrationDate": "2024-03-02T14:00:00Z",
    },
    {
        "UserID": 4,
        "Name": "John Smith",
        "Email": "john@example.com",
        "Password": "customer123",
        "Role": "customer",
        "ContactNumber": "+1-555-0200",
        "Approval": "approved",
        "RegistrationDate": "2024-02-10T11:15:00Z",
    },
    {
        "UserID": 5,
        "Name": "Emily Davis",
        "Email": "emily@example.com",
        "Password": "customer456",
        "Role": "customer",
        "ContactNumber": "+1-555-0201",
        "Approval": "approved",
        "RegistrationDate": "2024-02-20T16:45:00Z",
    },
)

DEFAULT_TRAVEL_PACKAGES: Rows = (
    {
        "PackageID": 1,
        "AgentID": 2,
        "Title": "Bali Paradise Escape",
        "Description": "Beaches, temples and rice terraces across southern Bali.",
        "Price": 1299.0,
        "Duration": "7 days",
        "IncludedServices": "Hotel, Breakfast, Airport Transfer, Guided Tours",
        "Image": "https://images.example.com/packages/bali.jpg",
    },
    {
        "PackageID": 2,
        "AgentID": 2,
        "Title": "Swiss Alps Adventure",
        "Description": "Scenic rail journeys and mountain hikes around Interlaken.",
        "Price": 2499.0,
        "Duration": "10 days",
        "IncludedServices": "Hotel, Rail Pass, Breakfast, Mountain Excursions",
        "Image": "https://images.example.com/packages/alps.jpg",
    },
    {
        "PackageID": 3,
        "AgentID": 3,
        "Title": "Tokyo City Explorer",
        "Description": "Neighbourhood walks, food markets and a day trip to Nikko.",
        "Price": 1899.0,
        "Duration": "6 days",
        "IncludedServices": "Hotel, Metro Pass, Guided Tours",
        "Image": "https://images.example.com/packages/tokyo.jpg",
    },
    {
        "PackageID": 4,
        "AgentID": 2,
        "Title": "Safari in Kenya",
        "Description": "Game drives in the Masai Mara with a lodge stay.",
        "Price": 3199.0,
        "Duration": "8 days",
        "IncludedServices": "Lodge, All Meals, Game Drives, Park Fees",
        "Image": "https://images.example.com/packages/kenya.jpg",
    },
)

DEFAULT_BOOKINGS: Rows = (
    {
        "BookingID": 1,
        "UserID": 4,
        "PackageID": 1,
        "StartDate": "2024-06-01",
        "EndDate": "2024-06-08",
        "Status": "confirmed",
        "PaymentID": 1,
    },
    {
        "BookingID": 2,
        "UserID": 5,
        "PackageID": 2,
        "StartDate": "2024-07-10",
        "EndDate": "2024-07-20",
        "Status": "completed",
        "PaymentID": 2,
    },
    {
        "BookingID": 3,
        "UserID": 4,
        "PackageID": 3,
        "StartDate": "2024-09-05",
        "EndDate": "2024-09-11",
        "Status": "pending",
        "PaymentID": None,
    },
)

DEFAULT_PAYMENTS: Rows = (
    {
        "PaymentID": 1,
        "UserID": 4,
        "BookingID": 1,
        "Amount": 1348.0,
        "Status": "completed",
        "PaymentMethod": "Credit Card",
    },
    {
        "PaymentID": 2,
        "UserID": 5,
        "BookingID": 2,
        "Amount": 2499.0,
        "Status": "completed",
        "PaymentMethod": "Credit Card",
    },
)

DEFAULT_REVIEWS: Rows = (
    {
        "ReviewID": 1,
        "UserID": 4,
        "PackageID": 1,
        "Rating": 5,
        "Comment": "Wonderful trip, every transfer was on time.",
        "Timestamp": "2024-06-10T08:00:00Z",
    },
    {
        "ReviewID": 2,
        "UserID": 5,
        "PackageID": 2,
        "Rating": 4,
        "Comment": "Stunning scenery, hotels were a bit far from the stations.",
        "Timestamp": "2024-07-22T19:30:00Z",
    },
)

DEFAULT_INSURANCE: Rows = (
    {"id": 1, "name": "Basic Coverage", "description": "Medical emergencies and trip delays.", "price": 49.0},
    {
        "id": 2,
        "name": "Standard Coverage",
        "description": "Basic coverage plus baggage loss and cancellation.",
        "price": 99.0,
    },
    {
        "id": 3,
        "name": "Premium Coverage",
        "description": "Comprehensive cover including adventure activities.",
        "price": 179.0,
    },
)

DEFAULT_ASSISTANCE_REQUESTS: Rows = (
    {
        "RequestID": 1,
        "UserID": 4,
        "IssueDescription": "Need to change the start date of my Tokyo booking.",
        "Priority": "medium",
        "Status": "pending",
        "ResolutionTime": None,
        "Timestamp": "2024-08-01T10:00:00Z",
    },
    {
        "RequestID": 2,
        "UserID": 5,
        "IssueDescription": "Invoice for the Swiss Alps trip is missing.",
        "Priority": "low",
        "Status": "completed",
        "ResolutionTime": "2024-07-25T12:00:00Z",
        "Timestamp": "2024-07-24T09:00:00Z",
    },
)

# JSON document keys, in collection order.
_DOCUMENT_KEYS: dict[str, str] = {
    "users": "users",
    "travelPackages": "travel_packages",
    "bookings": "bookings",
    "payments": "payments",
    "reviews": "reviews",
    "insurance": "insurance",
    "assistanceRequests": "assistance_requests",
}


@dataclasses.dataclass(frozen=True)
class SeedData:
    """Initial contents of all seven collections, as raw mappings."""

    users: Rows = ()
    travel_packages: Rows = ()
    bookings: Rows = ()
    payments: Rows = ()
    reviews: Rows = ()
    insurance: Rows = ()
    assistance_requests: Rows = ()

    @classmethod
    def from_mapping(cls, document: Mapping[str, Any]) -> SeedData:
        """Build seed data from a document keyed like the original fixtures.

        Missing collections are empty. Unknown keys are ignored.
        """
        kwargs: dict[str, Rows] = {}
        for doc_key, field_name in _DOCUMENT_KEYS.items():
            rows = document.get(doc_key, ())
            if not isinstance(rows, Sequence) or isinstance(rows, (str, bytes)):
                raise PortalConfigError(f"fixture collection {doc_key!r} must be a list")
            kwargs[field_name] = tuple(dict(row) for row in rows)
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str | Path) -> SeedData:
        """Load seed data from a JSON file."""
        fixture_path = Path(path)
        try:
            document = json.loads(fixture_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PortalConfigError(f"cannot load fixtures from {fixture_path}: {exc}") from exc
        if not isinstance(document, Mapping):
            raise PortalConfigError(f"fixtures in {fixture_path} must be a JSON object")
        _logger.debug("Loaded fixtures from %s", fixture_path)
        return cls.from_mapping(document)

    def to_mapping(self) -> dict[str, list[dict[str, Any]]]:
        return {
            doc_key: [dict(row) for row in getattr(self, field_name)]
            for doc_key, field_name in _DOCUMENT_KEYS.items()
        }


def default_seed() -> SeedData:
    """The built-in fixtures."""
    return SeedData(
        users=DEFAULT_USERS,
        travel_packages=DEFAULT_TRAVEL_PACKAGES,
        bookings=DEFAULT_BOOKINGS,
        payments=DEFAULT_PAYMENTS,
        reviews=DEFAULT_REVIEWS,
        insurance=DEFAULT_INSURANCE,
        assistance_requests=DEFAULT_ASSISTANCE_REQUESTS,
    )
