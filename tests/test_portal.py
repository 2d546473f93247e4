from __future__ import annotations

from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from travelportal.config import PortalConfig
from travelportal.exceptions import BookingError, PaymentValidationError, ProfileUpdateError
from travelportal.models.assistance import AssistanceStatus
from travelportal.models.booking import BookingStatus
from travelportal.models.payment import PaymentStatus
from travelportal.models.user import Approval, ProfileUpdate, User
from travelportal.portal import Portal
from travelportal.storage import MemoryStorage

_VALID_CARD = {
    "card_number": "4111 1111 1111 1111",
    "expiry_date": "12/30",
    "cvv": "123",
    "cardholder_name": "John Smith",
}


def _dt() -> datetime:
    return datetime(2026, 1, 1, 12, tzinfo=UTC)


def _portal(**kwargs) -> Portal:
    kwargs.setdefault("storage", MemoryStorage())
    return Portal(clock=_dt, **kwargs)


# ------------------------------------------------------------------
# Accounts
# ------------------------------------------------------------------


def test_login_uses_domain_users() -> None:
    portal = _portal()

    result = portal.login("john@example.com", "customer123")

    assert result.success
    assert portal.session.principal_id == 4
    assert portal.session.current_user == portal.data.get_user_by_id(4)


def test_register_agent_starts_pending() -> None:
    portal = _portal()

    agent = portal.register({"Name": "New Agent", "Email": "agent@new.com", "Password": "pw", "Role": "agent"})
    customer = portal.register({"Name": "New Cust", "Email": "cust@new.com", "Password": "pw", "Role": "customer"})

    assert agent.user_id == 6
    assert agent.approval == Approval.PENDING
    assert customer.approval == Approval.APPROVED
    assert customer.registration_date == _dt()


def test_set_user_approval() -> None:
    portal = _portal()

    approved = portal.set_user_approval(3, "approved")

    assert approved is not None
    assert approved.approval == Approval.APPROVED
    assert portal.set_user_approval(999, Approval.REJECTED) is None


def test_update_profile_refreshes_session_principal() -> None:
    storage = MemoryStorage()
    seen: list[User | None] = []
    portal = _portal(storage=storage, on_session_change=seen.append)
    portal.login("john@example.com", "customer123")

    updated = portal.update_profile(
        4,
        ProfileUpdate(
            name="John Q. Smith",
            email="john@example.com",
            contact_number="+1-555-9999",
            password="newpass",
            confirm_password="newpass",
        ),
    )

    assert updated.name == "John Q. Smith"
    assert portal.session.principal == updated
    assert seen[-1] == updated
    # The refreshed principal is what a restart restores.
    restored = _portal(storage=storage)
    assert restored.session.principal == updated
    # Domain records are not persisted, so the restored store has the fixture record.
    assert restored.session.current_user is not None
    assert restored.session.current_user.name == "John Smith"


def test_update_profile_password_mismatch() -> None:
    portal = _portal()

    with pytest.raises(ProfileUpdateError):
        portal.update_profile(4, ProfileUpdate(name="J", email="j@x.com", password="a", confirm_password="b"))

    assert portal.data.get_user_by_id(4).name == "John Smith"  # type: ignore[union-attr]


def test_update_profile_unknown_user() -> None:
    portal = _portal()

    with pytest.raises(ProfileUpdateError):
        portal.update_profile(999, ProfileUpdate(name="J", email="j@x.com"))


def test_updating_another_user_does_not_touch_session() -> None:
    portal = _portal()
    portal.login("john@example.com", "customer123")
    before = portal.session.principal

    portal.data.users.update(5, {"Name": "Someone Else"})

    assert portal.session.principal is before


def test_removed_user_keeps_dangling_session() -> None:
    portal = _portal()
    portal.login("john@example.com", "customer123")

    assert portal.remove_user(4) is True

    assert portal.session.is_authenticated
    assert portal.session.current_user is None


# ------------------------------------------------------------------
# Booking and payment
# ------------------------------------------------------------------


def test_book_and_pay_with_insurance() -> None:
    portal = _portal()

    booking = portal.book_package(4, 2, "2026-03-01", "2026-03-10")
    assert booking.booking_id == 4
    assert booking.status == BookingStatus.PENDING
    assert booking.payment_id is None

    payment = portal.pay_for_booking(booking.booking_id, _VALID_CARD, insurance_id=2)

    assert payment.payment_id == 3
    assert payment.amount == pytest.approx(2499.0 + 99.0)
    assert payment.status == PaymentStatus.COMPLETED
    assert payment.user_id == 4
    assert payment.booking_id == booking.booking_id
    linked = portal.data.get_booking_by_id(booking.booking_id)
    assert linked is not None
    assert linked.payment_id == payment.payment_id


def test_pay_without_insurance_charges_package_price() -> None:
    portal = _portal()

    payment = portal.pay_for_booking(3, _VALID_CARD)

    assert payment.amount == pytest.approx(1899.0)


def test_book_package_rejects_bad_input() -> None:
    portal = _portal()

    with pytest.raises(BookingError):
        portal.book_package(4, 999, "2026-03-01", "2026-03-10")
    with pytest.raises(BookingError):
        portal.book_package(999, 1, "2026-03-01", "2026-03-10")
    with pytest.raises(BookingError):
        portal.book_package(4, 1, date(2026, 3, 10), date(2026, 3, 1))
    assert len(portal.data.bookings) == 3


def test_paying_twice_is_rejected() -> None:
    portal = _portal()
    portal.pay_for_booking(3, _VALID_CARD)

    with pytest.raises(BookingError) as exc_info:
        portal.pay_for_booking(3, _VALID_CARD)

    assert exc_info.value.booking_id == 3
    assert len(portal.data.payments) == 3


def test_paying_cancelled_or_unknown_booking_is_rejected() -> None:
    portal = _portal()
    portal.set_booking_status(3, BookingStatus.CANCELLED)

    with pytest.raises(BookingError):
        portal.pay_for_booking(3, _VALID_CARD)
    with pytest.raises(BookingError):
        portal.pay_for_booking(999, _VALID_CARD)


def test_unknown_insurance_is_rejected() -> None:
    portal = _portal()

    with pytest.raises(BookingError):
        portal.pay_for_booking(3, _VALID_CARD, insurance_id=42)


def test_invalid_card_reports_field() -> None:
    portal = _portal()

    with pytest.raises(PaymentValidationError) as exc_info:
        portal.pay_for_booking(3, {**_VALID_CARD, "cvv": "1"})

    assert exc_info.value.field == "cvv"
    assert len(portal.data.payments) == 2
    assert portal.data.get_booking_by_id(3).payment_id is None  # type: ignore[union-attr]


def test_card_expiring_this_month_is_rejected() -> None:
    portal = _portal()

    with pytest.raises(PaymentValidationError) as exc_info:
        portal.pay_for_booking(3, {**_VALID_CARD, "expiry_date": f"{_dt():%m/%y}"})

    assert exc_info.value.field == "expiry_date"
    assert len(portal.data.payments) == 2


def test_expired_card_is_rejected() -> None:
    portal = _portal()

    with pytest.raises(PaymentValidationError) as exc_info:
        portal.pay_for_booking(3, {**_VALID_CARD, "expiry_date": "12/25"})

    assert exc_info.value.field == "expiry_date"


# ------------------------------------------------------------------
# Cancellation
# ------------------------------------------------------------------


def test_can_cancel_only_outside_notice_window() -> None:
    portal = _portal()
    far = portal.book_package(4, 1, "2026-01-09", "2026-01-12")
    near = portal.book_package(4, 1, "2026-01-08", "2026-01-12")

    assert portal.can_cancel_booking(far) is True
    assert portal.can_cancel_booking(near) is False
    assert portal.can_cancel_booking(near, today=date(2025, 12, 31)) is True


def test_cancel_booking() -> None:
    portal = _portal()
    booking = portal.book_package(4, 1, "2026-02-01", "2026-02-05")

    cancelled = portal.cancel_booking(booking.booking_id)

    assert cancelled.status == BookingStatus.CANCELLED
    assert portal.cancel_booking(booking.booking_id).status == BookingStatus.CANCELLED


def test_cancel_inside_notice_window_is_rejected() -> None:
    portal = _portal()
    booking = portal.book_package(4, 1, "2026-01-05", "2026-01-07")

    with pytest.raises(BookingError):
        portal.cancel_booking(booking.booking_id)

    assert portal.data.get_booking_by_id(booking.booking_id).status == BookingStatus.PENDING  # type: ignore[union-attr]


def test_cancellation_notice_is_configurable() -> None:
    portal = _portal(config=PortalConfig(cancellation_notice_days=1))
    booking = portal.book_package(4, 1, "2026-01-05", "2026-01-07")

    assert portal.cancel_booking(booking.booking_id).status == BookingStatus.CANCELLED


# ------------------------------------------------------------------
# Assistance and statistics
# ------------------------------------------------------------------


def test_assistance_triage_stamps_resolution_time() -> None:
    portal = _portal()
    request = portal.request_assistance(5, "Need a visa letter", "high")
    assert request.request_id == 3
    assert request.status == AssistanceStatus.PENDING

    in_progress = portal.set_assistance_status(request.request_id, "in_progress")
    assert in_progress is not None
    assert in_progress.resolution_time is None

    done = portal.set_assistance_status(request.request_id, AssistanceStatus.COMPLETED)
    assert done is not None
    assert done.resolution_time == _dt()
    assert not done.is_open


def test_statistics_for_default_fixtures() -> None:
    stats = _portal().statistics()

    assert stats.total_customers == 2
    assert stats.total_agents == 2
    assert stats.total_packages == 4
    assert stats.total_bookings == 3
    assert stats.total_revenue == pytest.approx(3847.0)
    assert stats.pending_bookings == 1
    assert stats.confirmed_bookings == 1
    assert stats.pending_assistance == 1


def test_statistics_follow_mutations() -> None:
    portal = _portal()
    booking = portal.book_package(5, 4, "2026-04-01", "2026-04-09")
    portal.pay_for_booking(booking.booking_id, _VALID_CARD)
    portal.set_booking_status(booking.booking_id, "confirmed")

    stats = portal.statistics()

    assert stats.total_bookings == 4
    assert stats.confirmed_bookings == 2
    assert stats.total_revenue == pytest.approx(3847.0 + 3199.0)


# ------------------------------------------------------------------
# Lifecycle and configuration
# ------------------------------------------------------------------


def test_session_persists_across_portals_via_storage_file(tmp_path: Path) -> None:
    config = PortalConfig(storage_path=str(tmp_path / "session.json"))
    with Portal(config, clock=_dt) as first:
        first.login("sarah@travel.com", "agent123")

    with Portal(config, clock=_dt) as second:
        assert second.session.principal_id == 2
        # Domain state is not persisted: a reload resets to the fixtures.
        assert len(second.data.bookings) == 3


def test_data_changes_are_not_persisted(tmp_path: Path) -> None:
    config = PortalConfig(storage_path=str(tmp_path / "session.json"))
    with Portal(config, clock=_dt) as first:
        first.book_package(4, 1, "2026-03-01", "2026-03-02")
        assert len(first.data.bookings) == 4

    with Portal(config, clock=_dt) as second:
        assert len(second.data.bookings) == 3


def test_close_detaches_session_listener() -> None:
    portal = _portal()
    portal.login("john@example.com", "customer123")
    before = portal.session.principal

    portal.close()
    portal.data.users.update(4, {"Name": "After Close"})

    assert portal.session.principal is before
