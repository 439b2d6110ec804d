"""
Name: Verification Query Use Cases Unit Tests

Responsibilities:
  - Participant history (ordering, revocation flag, not found)
  - Event listing (filters, pagination math, ordering, invalid range)
  - Event stats (revoked excluded, rate/average math, ties, timezone "today")
  - Daily counts (zero-filled window, bounds)
  - Eligibility dry-run never records

Collaborators:
  - seed.World (in-memory repositories)
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest
from seed import FIXED_NOW, World, fixed_clock

from checkpoint.application.usecases.verification import (
    CheckEligibilityUseCase,
    GetDailyVerificationsUseCase,
    GetParticipantHistoryUseCase,
    GetVerificationStatsUseCase,
    ListEventVerificationsUseCase,
    VerificationErrorCode,
)
from checkpoint.crosscutting.exceptions import DatabaseError
from checkpoint.domain.entities import ActionLog, ActionLogRevocation, Participant
from checkpoint.domain.value_objects import VerificationFilters

pytestmark = pytest.mark.unit


def _log(world: World, participant, action, *, at: datetime, verifier=None) -> ActionLog:
    log = ActionLog(
        id=uuid4(),
        participant_id=participant.id,
        action_id=action.id,
        verified_by=(verifier or world.staff).id,
        verified_at=at,
        created_at=at,
    )
    assert world.logs.create_action_log(log) is True
    return log


def _revoke(world: World, log: ActionLog) -> None:
    world.logs.create_revocation(
        ActionLogRevocation(
            id=uuid4(),
            action_log_id=log.id,
            reverted_by=world.admin.id,
            reverted_at=FIXED_NOW,
        )
    )


def _seed_participants(world: World, n: int) -> list[Participant]:
    return [
        world.participants.add_participant(
            Participant(id=uuid4(), event_id=world.free_event.id, name=f"Guest {i:02d}")
        )
        for i in range(n)
    ]


# =============================================================================
# History
# =============================================================================


class TestParticipantHistory:
    def test_records_are_newest_first_with_revocation_flag(self, world: World):
        older = _log(world, world.alice, world.lunch, at=FIXED_NOW - timedelta(hours=2))
        newer = _log(world, world.alice, world.workshop, at=FIXED_NOW)
        _revoke(world, older)

        result = GetParticipantHistoryUseCase(world.participants, world.logs).execute(
            world.alice.id
        )

        assert result.error is None
        assert [r.id for r in result.records] == [newer.id, older.id]
        assert result.records[0].is_reverted is False
        assert result.records[1].is_reverted is True
        assert result.records[0].action_name == "Workshop"
        assert result.records[0].event_title == "Tech Summit"
        assert result.records[0].verifier_email == "scanner@example.com"

    def test_participant_without_history(self, world: World):
        result = GetParticipantHistoryUseCase(world.participants, world.logs).execute(
            str(world.bob.id)
        )
        assert result.error is None
        assert result.records == []

    def test_unknown_participant(self, world: World):
        result = GetParticipantHistoryUseCase(world.participants, world.logs).execute(
            uuid4()
        )
        assert result.error.code == VerificationErrorCode.PARTICIPANT_NOT_FOUND

    def test_invalid_id(self, world: World):
        result = GetParticipantHistoryUseCase(world.participants, world.logs).execute(
            "abc"
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT


# =============================================================================
# Listing
# =============================================================================


class TestListEventVerifications:
    def _use_case(self, world: World) -> ListEventVerificationsUseCase:
        return ListEventVerificationsUseCase(world.events, world.logs)

    def test_pagination_math(self, world: World):
        guests = _seed_participants(world, 45)
        for i, guest in enumerate(guests):
            _log(world, guest, world.lunch, at=FIXED_NOW - timedelta(minutes=i))

        result = self._use_case(world).execute(
            world.free_event.id, VerificationFilters(page=3, page_size=20)
        )

        assert result.error is None
        assert result.total == 45
        assert result.total_pages == 3
        assert result.page == 3
        assert len(result.records) == 5
        # Página 3 = los 5 más antiguos.
        assert [r.participant_name for r in result.records] == [
            f"Guest {i:02d}" for i in range(40, 45)
        ]

    def test_empty_event_has_zero_pages(self, world: World):
        result = self._use_case(world).execute(world.paid_event.id)
        assert result.total == 0
        assert result.total_pages == 0
        assert result.records == []

    @pytest.mark.parametrize(
        "page, page_size, expected",
        [(0, 20, (1, 20)), (-3, 10, (1, 10)), (2, 0, (2, 20)), (1, 101, (1, 20))],
    )
    def test_page_normalization(self, world: World, page, page_size, expected):
        result = self._use_case(world).execute(
            world.free_event.id, VerificationFilters(page=page, page_size=page_size)
        )
        assert (result.page, result.page_size) == expected

    def test_newest_first(self, world: World):
        first = _log(world, world.alice, world.lunch, at=FIXED_NOW - timedelta(hours=1))
        second = _log(world, world.bob, world.lunch, at=FIXED_NOW)

        result = self._use_case(world).execute(world.free_event.id)
        assert [r.id for r in result.records] == [second.id, first.id]

    def test_filters(self, world: World):
        _log(world, world.alice, world.lunch, at=FIXED_NOW - timedelta(days=2))
        kept = _log(
            world, world.bob, world.lunch, at=FIXED_NOW, verifier=world.organizer
        )
        _log(world, world.alice, world.workshop, at=FIXED_NOW)

        result = self._use_case(world).execute(
            world.free_event.id,
            VerificationFilters(
                date_from=FIXED_NOW - timedelta(hours=1),
                date_to=FIXED_NOW,
                action_id=world.lunch.id,
                verifier_id=world.organizer.id,
            ),
        )
        assert result.total == 1
        assert [r.id for r in result.records] == [kept.id]

    def test_other_events_are_excluded(self, world: World):
        _log(world, world.dave_paid, world.closing_party, at=FIXED_NOW)
        result = self._use_case(world).execute(world.free_event.id)
        assert result.total == 0

    def test_inverted_date_range(self, world: World):
        result = self._use_case(world).execute(
            world.free_event.id,
            VerificationFilters(date_from=FIXED_NOW, date_to=FIXED_NOW - timedelta(days=1)),
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT

    def test_mixed_aware_and_naive_bounds(self, world: World):
        kept = _log(world, world.alice, world.lunch, at=FIXED_NOW)

        result = self._use_case(world).execute(
            world.free_event.id,
            VerificationFilters(
                date_from=datetime(2026, 3, 1, tzinfo=timezone.utc),
                date_to=datetime(2026, 3, 31),
            ),
        )

        assert result.error is None
        assert [r.id for r in result.records] == [kept.id]

    def test_naive_bound_is_taken_as_utc(self, world: World):
        _log(world, world.alice, world.lunch, at=FIXED_NOW - timedelta(hours=2))
        kept = _log(world, world.bob, world.lunch, at=FIXED_NOW)

        result = self._use_case(world).execute(
            world.free_event.id,
            VerificationFilters(date_from=datetime(2026, 3, 15, 13, 0)),
        )

        assert result.error is None
        assert [r.id for r in result.records] == [kept.id]

    def test_mixed_bounds_inverted_range(self, world: World):
        result = self._use_case(world).execute(
            world.free_event.id,
            VerificationFilters(
                date_from=datetime(2026, 3, 31, tzinfo=timezone.utc),
                date_to=datetime(2026, 3, 1),
            ),
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT
        assert result.error.details == {"field": "date_from"}

    def test_unknown_event(self, world: World):
        result = self._use_case(world).execute(uuid4())
        assert result.error.code == VerificationErrorCode.EVENT_NOT_FOUND


# =============================================================================
# Stats
# =============================================================================


class TestVerificationStats:
    def _use_case(self, world: World, zone=None) -> GetVerificationStatsUseCase:
        return GetVerificationStatsUseCase(
            world.events,
            world.participants,
            world.logs,
            event_zone=zone,
            clock=fixed_clock,
        )

    def test_stats_exclude_revoked_logs(self, world: World):
        yesterday = FIXED_NOW - timedelta(days=1)
        _log(world, world.alice, world.lunch, at=yesterday)
        _log(world, world.bob, world.lunch, at=FIXED_NOW, verifier=world.organizer)
        _log(world, world.alice, world.workshop, at=FIXED_NOW - timedelta(hours=1))
        revoked = _log(world, world.bob, world.workshop, at=FIXED_NOW)
        _revoke(world, revoked)

        result = self._use_case(world).execute(world.free_event.id)
        stats = result.stats

        assert result.error is None
        assert stats.total_verifications == 3
        assert stats.unique_participants == 2
        assert stats.total_participants == 2
        assert stats.verification_rate == pytest.approx(1.5)
        assert stats.most_verified_action == "Lunch"
        assert stats.top_verifier == "scanner@example.com"
        assert stats.last_verification == FIXED_NOW
        assert stats.today_verifications == 2
        assert stats.average_daily_verifications == pytest.approx(1.5)

    def test_empty_event(self, world: World):
        stats = self._use_case(world).execute(world.paid_event.id).stats

        assert stats.total_verifications == 0
        assert stats.unique_participants == 0
        assert stats.total_participants == 2
        assert stats.verification_rate == 0.0
        assert stats.most_verified_action is None
        assert stats.top_verifier is None
        assert stats.last_verification is None
        assert stats.average_daily_verifications == 0.0

    def test_no_participants_rate_is_zero(self, world: World):
        stats = self._use_case(world).execute(world.other_event.id).stats
        assert stats.total_participants == 0
        assert stats.verification_rate == 0.0

    def test_ties_break_by_name(self, world: World):
        _log(world, world.alice, world.workshop, at=FIXED_NOW)
        _log(world, world.bob, world.lunch, at=FIXED_NOW)

        stats = self._use_case(world).execute(world.free_event.id).stats
        assert stats.most_verified_action == "Lunch"

    def test_today_follows_event_timezone(self, world: World):
        # 02:00 UTC del 15 = 23:00 del 14 en Buenos Aires: "ayer" en la zona.
        _log(world, world.alice, world.lunch, at=datetime(2026, 3, 15, 2, 0, tzinfo=timezone.utc))
        _log(world, world.bob, world.lunch, at=FIXED_NOW)

        utc_stats = self._use_case(world).execute(world.free_event.id).stats
        local_stats = self._use_case(
            world, zone=ZoneInfo("America/Argentina/Buenos_Aires")
        ).execute(world.free_event.id).stats

        assert utc_stats.today_verifications == 2
        assert local_stats.today_verifications == 1
        assert local_stats.average_daily_verifications == pytest.approx(1.0)

    def test_unknown_event(self, world: World):
        result = self._use_case(world).execute(uuid4())
        assert result.error.code == VerificationErrorCode.EVENT_NOT_FOUND

    def test_store_failure(self, world: World):
        class BrokenLogs:
            def get_event_aggregates(self, *args, **kwargs):
                raise DatabaseError("timeout")

        result = GetVerificationStatsUseCase(
            world.events, world.participants, BrokenLogs(), clock=fixed_clock
        ).execute(world.free_event.id)
        assert result.error.code == VerificationErrorCode.PERSISTENCE_ERROR


# =============================================================================
# Daily counts
# =============================================================================


class TestDailyVerifications:
    def _use_case(self, world: World) -> GetDailyVerificationsUseCase:
        return GetDailyVerificationsUseCase(world.events, world.logs, clock=fixed_clock)

    def test_zero_filled_ascending_window(self, world: World):
        _log(world, world.alice, world.lunch, at=FIXED_NOW - timedelta(days=2))
        _log(world, world.bob, world.lunch, at=FIXED_NOW)
        _log(world, world.alice, world.workshop, at=FIXED_NOW - timedelta(hours=1))
        old = _log(world, world.bob, world.workshop, at=FIXED_NOW - timedelta(days=10))

        result = self._use_case(world).execute(world.free_event.id, days=3)

        assert result.error is None
        assert [(d.day, d.count) for d in result.days] == [
            (date(2026, 3, 13), 1),
            (date(2026, 3, 14), 0),
            (date(2026, 3, 15), 2),
        ]
        assert old.verified_at.date() < result.days[0].day

    def test_revoked_logs_are_not_counted(self, world: World):
        log = _log(world, world.alice, world.lunch, at=FIXED_NOW)
        _revoke(world, log)

        result = self._use_case(world).execute(world.free_event.id, days=1)
        assert [(d.day, d.count) for d in result.days] == [(date(2026, 3, 15), 0)]

    def test_default_window_is_thirty_days(self, world: World):
        result = self._use_case(world).execute(world.free_event.id)
        assert len(result.days) == 30
        assert result.days[-1].day == date(2026, 3, 15)

    @pytest.mark.parametrize("days", [0, -1, 366])
    def test_out_of_range_window(self, world: World, days):
        result = self._use_case(world).execute(world.free_event.id, days=days)
        assert result.error.code == VerificationErrorCode.INVALID_INPUT

    def test_unknown_event(self, world: World):
        result = self._use_case(world).execute(uuid4())
        assert result.error.code == VerificationErrorCode.EVENT_NOT_FOUND


# =============================================================================
# Eligibility dry-run
# =============================================================================


class TestCheckEligibility:
    def _use_case(self, world: World) -> CheckEligibilityUseCase:
        return CheckEligibilityUseCase(
            world.participants, world.events, world.users, world.logs, clock=fixed_clock
        )

    def test_eligible_and_nothing_recorded(self, world: World):
        result = self._use_case(world).execute(world.alice.id, world.lunch.id)

        assert result.eligible is True
        assert result.error is None
        assert world.logs.list_by_participant(world.alice.id) == []

    def test_already_verified(self, world: World):
        _log(world, world.alice, world.lunch, at=FIXED_NOW)
        result = self._use_case(world).execute(world.alice.id, world.lunch.id)

        assert result.eligible is False
        assert result.error.code == VerificationErrorCode.ALREADY_VERIFIED

    def test_payment_required(self, world: World):
        result = self._use_case(world).execute(
            world.carol_unpaid.id, world.closing_party.id
        )
        assert result.error.code == VerificationErrorCode.PAYMENT_REQUIRED

    def test_unknown_action_id(self, world: World):
        result = self._use_case(world).execute(world.alice.id, uuid4())
        assert result.error.code == VerificationErrorCode.ACTION_NOT_FOUND

    def test_invalid_ids(self, world: World):
        result = self._use_case(world).execute("x", world.lunch.id)
        assert result.eligible is False
        assert result.error.code == VerificationErrorCode.INVALID_INPUT
