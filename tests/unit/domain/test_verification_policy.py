"""Unit tests for the pure eligibility gates."""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from checkpoint.domain.entities import (
    Event,
    EventAction,
    EventDay,
    Participant,
    PaymentStatus,
)
from checkpoint.domain.verification_policy import (
    belongs_to_same_event,
    can_revert,
    has_event_day_started,
    is_active_staff,
    is_payment_satisfied,
    local_today,
)
from checkpoint.identity.users import User, UserRole

pytestmark = pytest.mark.unit


def _user(role: UserRole = UserRole.STAFF, is_active: bool = True) -> User:
    return User(id=uuid4(), email="u@example.com", role=role, is_active=is_active)


def _participant(event_id, status: PaymentStatus = PaymentStatus.UNPAID) -> Participant:
    return Participant(id=uuid4(), event_id=event_id, name="P", payment_status=status)


class TestStaffRules:
    def test_missing_user_is_not_active_staff(self):
        assert is_active_staff(None) is False

    def test_inactive_user_is_not_active_staff(self):
        assert is_active_staff(_user(is_active=False)) is False

    def test_any_active_role_can_verify(self):
        for role in UserRole:
            assert is_active_staff(_user(role=role)) is True

    def test_only_active_admin_can_revert(self):
        assert can_revert(_user(role=UserRole.ADMIN)) is True
        assert can_revert(_user(role=UserRole.ORGANIZER)) is False
        assert can_revert(_user(role=UserRole.STAFF)) is False
        assert can_revert(_user(role=UserRole.ADMIN, is_active=False)) is False
        assert can_revert(None) is False


class TestEventConsistency:
    def test_same_event(self):
        event_id = uuid4()
        action = EventAction(
            id=uuid4(), event_id=event_id, event_day_id=uuid4(), name="A", code="A"
        )
        assert belongs_to_same_event(_participant(event_id), action) is True

    def test_different_event(self):
        action = EventAction(
            id=uuid4(), event_id=uuid4(), event_day_id=uuid4(), name="A", code="A"
        )
        assert belongs_to_same_event(_participant(uuid4()), action) is False


class TestPaymentGate:
    def test_free_event_never_requires_payment(self):
        event = Event(id=uuid4(), title="Free", ticket_price=Decimal("0"))
        for status in PaymentStatus:
            assert is_payment_satisfied(_participant(event.id, status), event) is True

    def test_paid_event_requires_paid_status(self):
        event = Event(id=uuid4(), title="Paid", ticket_price=Decimal("10.50"))
        assert is_payment_satisfied(_participant(event.id, PaymentStatus.PAID), event)
        assert not is_payment_satisfied(
            _participant(event.id, PaymentStatus.PENDING), event
        )
        assert not is_payment_satisfied(
            _participant(event.id, PaymentStatus.UNPAID), event
        )


class TestTemporalGate:
    def _day(self, d: date) -> EventDay:
        return EventDay(id=uuid4(), event_id=uuid4(), day_number=1, date=d)

    def test_same_day_counts_as_started(self):
        assert has_event_day_started(self._day(date(2026, 3, 15)), date(2026, 3, 15))

    def test_past_day_started(self):
        assert has_event_day_started(self._day(date(2026, 3, 1)), date(2026, 3, 15))

    def test_future_day_not_started(self):
        assert not has_event_day_started(self._day(date(2026, 3, 16)), date(2026, 3, 15))

    def test_local_today_uses_event_zone(self):
        # 02:00 UTC del 16 = 23:00 del 15 en Buenos Aires (UTC-3).
        now = datetime(2026, 3, 16, 2, 0, tzinfo=timezone.utc)
        assert local_today(now, ZoneInfo("UTC")) == date(2026, 3, 16)
        assert local_today(now, ZoneInfo("America/Argentina/Buenos_Aires")) == date(
            2026, 3, 15
        )
