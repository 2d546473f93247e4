"""In-memory domain store.

This is the single owner of all portal records. Every mutation goes
through one of its collections and is published to subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from travelportal.exceptions import PortalError
from travelportal.fixtures import SeedData
from travelportal.models._base import utcnow
from travelportal.models.assistance import AssistanceRequest, AssistanceRequestUpdate, AssistanceStatus
from travelportal.models.booking import Booking, BookingStatus, BookingUpdate
from travelportal.models.insurance import Insurance
from travelportal.models.package import TravelPackage, TravelPackageUpdate
from travelportal.models.payment import Payment, PaymentUpdate
from travelportal.models.review import Review, ReviewUpdate
from travelportal.models.user import Approval, User, UserUpdate
from travelportal.state.collection import Catalog, Collection, DeletableCollection
from travelportal.state.events import ChangeEvent, CollectionName

_logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


class DomainStore:
    """In-memory store for the seven portal collections.

    Collections are seeded from a copy of *seed* and are not persisted.
    Changes are pushed to subscribers registered with :meth:`subscribe`.

    Usage::

        with DomainStore(default_seed()) as store:
            booking = store.bookings.add({"UserID": 4, "PackageID": 1, ...})
    """

    def __init__(
        self,
        seed: SeedData | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        seed = seed if seed is not None else SeedData()
        self._clock = clock
        self._listeners: list[tuple[Listener, frozenset[CollectionName] | None]] = []
        self._closed = False

        self.users: DeletableCollection[User] = DeletableCollection(
            CollectionName.USERS,
            User,
            UserUpdate,
            seed.users,
            defaults=self._user_defaults,
            publish=self._notify,
        )
        self.travel_packages: DeletableCollection[TravelPackage] = DeletableCollection(
            CollectionName.TRAVEL_PACKAGES,
            TravelPackage,
            TravelPackageUpdate,
            seed.travel_packages,
            publish=self._notify,
        )
        self.bookings: DeletableCollection[Booking] = DeletableCollection(
            CollectionName.BOOKINGS,
            Booking,
            BookingUpdate,
            seed.bookings,
            defaults=lambda: {"status": BookingStatus.PENDING, "payment_id": None},
            publish=self._notify,
        )
        # Payments are never destroyed.
        self.payments: Collection[Payment] = Collection(
            CollectionName.PAYMENTS,
            Payment,
            PaymentUpdate,
            seed.payments,
            publish=self._notify,
        )
        self.reviews: DeletableCollection[Review] = DeletableCollection(
            CollectionName.REVIEWS,
            Review,
            ReviewUpdate,
            seed.reviews,
            defaults=lambda: {"timestamp": self._clock()},
            publish=self._notify,
        )
        self.insurance: Catalog[Insurance] = Catalog(CollectionName.INSURANCE, Insurance, seed.insurance)
        self.assistance_requests: DeletableCollection[AssistanceRequest] = DeletableCollection(
            CollectionName.ASSISTANCE_REQUESTS,
            AssistanceRequest,
            AssistanceRequestUpdate,
            seed.assistance_requests,
            defaults=self._assistance_defaults,
            publish=self._notify,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> DomainStore:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """Drop all subscribers. Collections remain readable."""
        self._listeners.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Generated defaults
    # ------------------------------------------------------------------

    def _user_defaults(self) -> dict[str, Any]:
        return {"approval": Approval.APPROVED, "registration_date": self._clock()}

    def _assistance_defaults(self) -> dict[str, Any]:
        return {
            "status": AssistanceStatus.PENDING,
            "resolution_time": None,
            "timestamp": self._clock(),
        }

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        listener: Listener,
        *,
        collections: Iterable[CollectionName] | None = None,
    ) -> Callable[[], None]:
        """Register *listener* for change events.

        When *collections* is given, only changes to those collections are
        delivered. Returns a function that unsubscribes the listener.
        """
        if self._closed:
            raise PortalError("DomainStore is closed")
        entry = (listener, frozenset(collections) if collections is not None else None)
        self._listeners.append(entry)

        def _unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return _unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        for listener, wanted in list(self._listeners):
            if wanted is not None and event.collection not in wanted:
                continue
            try:
                listener(event)
            except Exception:
                _logger.warning(
                    "Change listener failed for %s %s",
                    event.collection,
                    event.action,
                    exc_info=True,
                )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def collections(self) -> dict[CollectionName, Catalog[Any]]:
        return {
            CollectionName.USERS: self.users,
            CollectionName.TRAVEL_PACKAGES: self.travel_packages,
            CollectionName.BOOKINGS: self.bookings,
            CollectionName.PAYMENTS: self.payments,
            CollectionName.REVIEWS: self.reviews,
            CollectionName.INSURANCE: self.insurance,
            CollectionName.ASSISTANCE_REQUESTS: self.assistance_requests,
        }

    def get_user_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def find_user_by_email(self, email: str) -> User | None:
        """First user with exactly this email. Emails are not unique."""
        for user in self.users:
            if user.email == email:
                return user
        return None

    def get_package_by_id(self, package_id: int) -> TravelPackage | None:
        return self.travel_packages.get(package_id)

    def get_packages_by_agent_id(self, agent_id: int) -> list[TravelPackage]:
        return self.travel_packages.where(agent_id=agent_id)

    def get_booking_by_id(self, booking_id: int) -> Booking | None:
        return self.bookings.get(booking_id)

    def get_bookings_by_user_id(self, user_id: int) -> list[Booking]:
        return self.bookings.where(user_id=user_id)

    def get_payment_by_id(self, payment_id: int | None) -> Payment | None:
        if payment_id is None:
            return None
        return self.payments.get(payment_id)

    def get_payments_by_user_id(self, user_id: int) -> list[Payment]:
        return self.payments.where(user_id=user_id)

    def get_reviews_by_package_id(self, package_id: int) -> list[Review]:
        return self.reviews.where(package_id=package_id)

    def get_insurance_by_id(self, insurance_id: int) -> Insurance | None:
        return self.insurance.get(insurance_id)

    def get_assistance_requests_by_user_id(self, user_id: int) -> list[AssistanceRequest]:
        return self.assistance_requests.where(user_id=user_id)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def sync_users_from_auth(self, users: Iterable[User | Mapping[str, Any]]) -> None:
        """Replace the whole user collection."""
        self.users.replace(users)

    def dump(self) -> dict[str, list[dict[str, Any]]]:
        """All collections in the stored (fixture) shape."""
        return {name.value: catalog.to_storage() for name, catalog in self.collections().items()}
