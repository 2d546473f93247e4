"""travelportal - In-memory domain and session state for a travel-booking portal."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("travelportal")
except PackageNotFoundError:
    __version__ = "0+local"
from travelportal.config import PortalConfig
from travelportal.exceptions import (
    BookingError,
    PaymentValidationError,
    PortalConfigError,
    PortalError,
    ProfileUpdateError,
    StorageError,
)
from travelportal.fixtures import SeedData, default_seed
from travelportal.models import (
    Approval,
    AssistanceRequest,
    AssistanceStatus,
    Booking,
    BookingStatus,
    CardDetails,
    Insurance,
    Payment,
    PaymentStatus,
    PortalStatistics,
    Priority,
    ProfileUpdate,
    Review,
    Role,
    TravelPackage,
    User,
)
from travelportal.portal import Portal
from travelportal.session import LoginResult, SessionStore
from travelportal.state import ChangeAction, ChangeEvent, CollectionName, DomainStore
from travelportal.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "__version__",
    "Approval",
    "AssistanceRequest",
    "AssistanceStatus",
    "Booking",
    "BookingError",
    "BookingStatus",
    "CardDetails",
    "ChangeAction",
    "ChangeEvent",
    "CollectionName",
    "DomainStore",
    "Insurance",
    "JsonFileStorage",
    "KeyValueStorage",
    "LoginResult",
    "MemoryStorage",
    "Payment",
    "PaymentStatus",
    "PaymentValidationError",
    "Portal",
    "PortalConfig",
    "PortalConfigError",
    "PortalError",
    "PortalStatistics",
    "Priority",
    "ProfileUpdate",
    "ProfileUpdateError",
    "Review",
    "Role",
    "SeedData",
    "SessionStore",
    "StorageError",
    "TravelPackage",
    "User",
    "default_seed",
]
