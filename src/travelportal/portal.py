"""Portal container wiring the domain store to the session store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from travelportal._constants import DEFAULT_PAYMENT_METHOD
from travelportal.config import PortalConfig
from travelportal.exceptions import BookingError, PaymentValidationError, ProfileUpdateError
from travelportal.fixtures import SeedData, default_seed
from travelportal.models._base import utcnow
from travelportal.models.assistance import AssistanceRequest, AssistanceRequestUpdate, AssistanceStatus
from travelportal.models.booking import Booking, BookingStatus, BookingUpdate
from travelportal.models.payment import CardDetails, Payment, PaymentStatus
from travelportal.models.statistics import PortalStatistics
from travelportal.models.user import Approval, ProfileUpdate, Role, User, UserUpdate
from travelportal.session import LoginResult, SessionStore
from travelportal.state.events import ChangeEvent, CollectionName
from travelportal.state.policy import normalize_keys
from travelportal.state.store import DomainStore
from travelportal.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

_logger = logging.getLogger(__name__)


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class Portal:
    """Domain and session stores with the portal's booking workflows.

    Usage::

        with Portal(PortalConfig.from_env()) as portal:
            result = portal.login("john@example.com", "customer123")
            booking = portal.book_package(result.user.user_id, 1, "2030-05-01", "2030-05-08")
    """

    def __init__(
        self,
        config: PortalConfig | None = None,
        *,
        storage: KeyValueStorage | None = None,
        seed: SeedData | None = None,
        clock: Callable[[], datetime] = utcnow,
        on_session_change: Callable[[User | None], None] | None = None,
    ) -> None:
        self._config = config if config is not None else PortalConfig()
        self._clock = clock

        if storage is None:
            if self._config.storage_path:
                storage = JsonFileStorage(self._config.storage_path)
            else:
                storage = MemoryStorage()
        if seed is None:
            seed = SeedData.from_json(self._config.fixtures_path) if self._config.fixtures_path else default_seed()

        self.data = DomainStore(seed, clock=clock)
        self.session = SessionStore(
            storage,
            key=self._config.session_key,
            directory=self.data,
            on_change=on_session_change,
        )
        self._unsubscribe = self.data.subscribe(self._on_users_changed, collections=[CollectionName.USERS])

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> Portal:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self._unsubscribe()
        self.session.close()
        self.data.close()

    @property
    def config(self) -> PortalConfig:
        return self._config

    def _today(self) -> date:
        return self._clock().date()

    def _on_users_changed(self, event: ChangeEvent) -> None:
        """Keep the persisted principal in step with its domain record."""
        principal = self.session.principal
        if principal is None:
            return
        for user in event.snapshot:
            if user.user_id == principal.user_id:
                if user != principal:
                    self.session.update_user(user)
                return

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        return self.session.login(email, password, self.data.users.snapshot)

    def logout(self) -> None:
        self.session.logout()

    def register(self, data: Mapping[str, Any]) -> User:
        """Create an account. Agents start ``pending`` unless approval is given."""
        fields = normalize_keys(User, data)
        if "approval" not in fields and fields.get("role") == Role.AGENT:
            fields["approval"] = Approval.PENDING
        user = self.data.users.add(fields)
        _logger.info("Registered %s account %s", user.role, user.user_id)
        return user

    def update_profile(self, user_id: int, profile: ProfileUpdate) -> User:
        if not profile.passwords_match:
            raise ProfileUpdateError("Passwords do not match")
        updated = self.data.users.update(user_id, profile.to_user_update())
        if updated is None:
            raise ProfileUpdateError(f"Unknown user {user_id}")
        return updated

    def set_user_approval(self, user_id: int, approval: Approval | str) -> User | None:
        return self.data.users.update(user_id, UserUpdate(approval=Approval(approval)))

    def remove_user(self, user_id: int) -> bool:
        return self.data.users.delete(user_id)

    # ------------------------------------------------------------------
    # Bookings and payments
    # ------------------------------------------------------------------

    def book_package(
        self,
        user_id: int,
        package_id: int,
        start_date: date | str,
        end_date: date | str,
    ) -> Booking:
        """Create a pending, unpaid booking."""
        if self.data.get_user_by_id(user_id) is None:
            raise BookingError(f"Unknown user {user_id}")
        if self.data.get_package_by_id(package_id) is None:
            raise BookingError(f"Unknown package {package_id}")
        start, end = _as_date(start_date), _as_date(end_date)
        if end < start:
            raise BookingError("End date must not be before start date")
        return self.data.bookings.add(
            {
                "user_id": user_id,
                "package_id": package_id,
                "start_date": start,
                "end_date": end,
                "status": BookingStatus.PENDING,
                "payment_id": None,
            }
        )

    def pay_for_booking(
        self,
        booking_id: int,
        card: CardDetails | Mapping[str, Any],
        *,
        insurance_id: int | None = None,
        method: str = DEFAULT_PAYMENT_METHOD,
    ) -> Payment:
        """Record a completed payment and link it back to the booking.

        The amount is the package price plus the selected insurance price.
        """
        booking = self.data.get_booking_by_id(booking_id)
        if booking is None:
            raise BookingError(f"Unknown booking {booking_id}", booking_id=booking_id)
        if booking.status == BookingStatus.CANCELLED:
            raise BookingError("Cannot pay for a cancelled booking", booking_id=booking_id)
        if booking.is_paid:
            raise BookingError("Booking is already paid", booking_id=booking_id)
        package = self.data.get_package_by_id(booking.package_id)
        if package is None:
            raise BookingError(f"Booking references unknown package {booking.package_id}", booking_id=booking_id)
        insurance = None
        if insurance_id is not None:
            insurance = self.data.get_insurance_by_id(insurance_id)
            if insurance is None:
                raise BookingError(f"Unknown insurance {insurance_id}", booking_id=booking_id)

        card = self._validate_card(card)

        amount = package.price + (insurance.price if insurance is not None else 0.0)
        payment = self.data.payments.add(
            {
                "user_id": booking.user_id,
                "booking_id": booking.booking_id,
                "amount": amount,
                "status": PaymentStatus.COMPLETED,
                "payment_method": method,
            }
        )
        self.data.bookings.update(booking.booking_id, BookingUpdate(payment_id=payment.payment_id))
        _logger.info(
            "Payment %s of %.2f recorded for booking %s (card ending %s)",
            payment.payment_id,
            amount,
            booking.booking_id,
            card.last_four,
        )
        return payment

    def _validate_card(self, card: CardDetails | Mapping[str, Any]) -> CardDetails:
        if not isinstance(card, CardDetails):
            try:
                card = CardDetails.model_validate(card)
            except ValidationError as exc:
                error = exc.errors()[0]
                field = ".".join(str(part) for part in error.get("loc", ()))
                raise PaymentValidationError(error.get("msg", "invalid card details"), field=field) from exc
        if card.is_expired(self._today()):
            raise PaymentValidationError("Card has expired", field="expiry_date")
        return card

    def can_cancel_booking(self, booking: Booking, today: date | None = None) -> bool:
        """True while the start date is more than the notice period away."""
        today = today if today is not None else self._today()
        return (booking.start_date - today).days > self._config.cancellation_notice_days

    def cancel_booking(self, booking_id: int, today: date | None = None) -> Booking:
        booking = self.data.get_booking_by_id(booking_id)
        if booking is None:
            raise BookingError(f"Unknown booking {booking_id}", booking_id=booking_id)
        if booking.status == BookingStatus.CANCELLED:
            return booking
        if not self.can_cancel_booking(booking, today):
            raise BookingError(
                f"Bookings can only be cancelled more than {self._config.cancellation_notice_days} days in advance",
                booking_id=booking_id,
            )
        updated = self.data.bookings.update(booking_id, BookingUpdate(status=BookingStatus.CANCELLED))
        assert updated is not None  # noqa: S101
        return updated

    def set_booking_status(self, booking_id: int, status: BookingStatus | str) -> Booking | None:
        return self.data.bookings.update(booking_id, BookingUpdate(status=BookingStatus(status)))

    # ------------------------------------------------------------------
    # Assistance
    # ------------------------------------------------------------------

    def request_assistance(self, user_id: int, issue_description: str, priority: str = "medium") -> AssistanceRequest:
        return self.data.assistance_requests.add(
            {"user_id": user_id, "issue_description": issue_description, "priority": priority}
        )

    def set_assistance_status(self, request_id: int, status: AssistanceStatus | str) -> AssistanceRequest | None:
        """Move a request through triage; completing it stamps the resolution time."""
        status = AssistanceStatus(status)
        resolution_time = self._clock() if status == AssistanceStatus.COMPLETED else None
        return self.data.assistance_requests.update(
            request_id,
            AssistanceRequestUpdate(status=status, resolution_time=resolution_time),
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def statistics(self) -> PortalStatistics:
        users = self.data.users.snapshot
        bookings = self.data.bookings.snapshot
        return PortalStatistics(
            total_customers=sum(1 for user in users if user.role == Role.CUSTOMER),
            total_agents=sum(1 for user in users if user.role == Role.AGENT),
            total_packages=len(self.data.travel_packages),
            total_bookings=len(bookings),
            total_revenue=sum(payment.amount for payment in self.data.payments),
            pending_bookings=sum(1 for booking in bookings if booking.status == BookingStatus.PENDING),
            confirmed_bookings=sum(1 for booking in bookings if booking.status == BookingStatus.CONFIRMED),
            pending_assistance=sum(
                1 for request in self.data.assistance_requests if request.status == AssistanceStatus.PENDING
            ),
        )
