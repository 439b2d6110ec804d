"""
Name: VerifyParticipantActionUseCase Unit Tests

Responsibilities:
  - Validate the three reference scenarios (free, unpaid-on-paid, duplicate)
  - Validate each eligibility gate and its precedence
  - Validate at-most-once redemption under concurrent scans
  - Validate persistence failures surface as PERSISTENCE_ERROR

Collaborators:
  - seed.World (in-memory repositories)
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest
from seed import FIXED_NOW, World, fixed_clock

from checkpoint.application.usecases.verification import (
    VerificationErrorCode,
    VerifyParticipantActionUseCase,
)
from checkpoint.crosscutting.exceptions import DatabaseError
from checkpoint.domain.entities import ActionLog, EventAction, EventDay

pytestmark = pytest.mark.unit


def _use_case(world: World, **kwargs) -> VerifyParticipantActionUseCase:
    kwargs.setdefault("clock", fixed_clock)
    return VerifyParticipantActionUseCase(
        world.participants, world.events, world.users, world.logs, **kwargs
    )


def _verify(world: World, participant, action_code: str, verifier=None, **kwargs):
    return _use_case(world, **kwargs).execute(
        credential=world.credential_for(participant),
        action_code=action_code,
        verifier_id=(verifier or world.staff).id,
    )


# =============================================================================
# Reference scenarios
# =============================================================================


class TestScenarios:
    def test_free_event_redemption_succeeds(self, world: World):
        result = _verify(world, world.alice, "LUNCH-D1")

        assert result.error is None
        assert result.success is True
        assert result.message == "Successfully verified Lunch for participant Alice"
        assert result.participant_name == "Alice"
        assert result.action_name == "Lunch"
        assert result.event_title == "Tech Summit"
        assert result.timestamp == FIXED_NOW
        assert result.redemption_id == result.log.id
        assert result.log.verified_by == world.staff.id
        assert world.logs.exists(world.alice.id, world.lunch.id)

    def test_unpaid_participant_on_paid_event_is_rejected(self, world: World):
        result = _verify(world, world.carol_unpaid, "PARTY")

        assert result.success is False
        assert result.error.code == VerificationErrorCode.PAYMENT_REQUIRED
        assert "pending" in result.error.message
        assert result.error.details == {"payment_status": "pending"}
        assert not world.logs.exists(world.carol_unpaid.id, world.closing_party.id)

    def test_paid_participant_on_paid_event_succeeds(self, world: World):
        result = _verify(world, world.dave_paid, "PARTY")
        assert result.success is True

    def test_second_scan_is_already_verified(self, world: World):
        first = _verify(world, world.alice, "LUNCH-D1")
        second = _verify(world, world.alice, "LUNCH-D1")

        assert first.success is True
        assert second.success is False
        assert second.error.code == VerificationErrorCode.ALREADY_VERIFIED
        records = world.logs.list_by_participant(world.alice.id)
        assert len(records) == 1


# =============================================================================
# Input + credential
# =============================================================================


class TestInputValidation:
    @pytest.mark.parametrize("credential", ["", "   "])
    def test_blank_credential_is_invalid_input(self, world: World, credential):
        result = _use_case(world).execute(
            credential=credential, action_code="LUNCH-D1", verifier_id=world.staff.id
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT
        assert result.error.details == {"field": "credential"}

    def test_blank_action_code_is_invalid_input(self, world: World):
        result = _use_case(world).execute(
            credential=world.credential_for(world.alice),
            action_code=" ",
            verifier_id=world.staff.id,
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT
        assert result.error.details == {"field": "action_code"}

    def test_non_uuid_verifier_is_invalid_input(self, world: World):
        result = _use_case(world).execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id="scanner-7",
        )
        assert result.error.code == VerificationErrorCode.INVALID_INPUT
        assert result.error.details == {"field": "verifier_id"}

    def test_unparseable_credential(self, world: World):
        result = _use_case(world).execute(
            credential="hello world",
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        assert result.error.code == VerificationErrorCode.INVALID_CREDENTIAL
        assert result.message == "Invalid QR code format."

    def test_plain_uuid_credential_is_accepted(self, world: World):
        result = _use_case(world).execute(
            credential=str(world.alice.id),
            action_code="LUNCH-D1",
            verifier_id=str(world.staff.id),
        )
        assert result.success is True


# =============================================================================
# Gates
# =============================================================================


class TestGates:
    def test_unknown_participant(self, world: World):
        result = _use_case(world).execute(
            credential=f"uploads/qrcodes/{uuid4()}.png",
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        assert result.error.code == VerificationErrorCode.PARTICIPANT_NOT_FOUND

    def test_unknown_action(self, world: World):
        result = _verify(world, world.alice, "NOPE")
        assert result.error.code == VerificationErrorCode.ACTION_NOT_FOUND

    def test_inactive_action(self, world: World):
        result = _verify(world, world.alice, "BREAKFAST-D1")
        assert result.error.code == VerificationErrorCode.ACTION_INACTIVE

    def test_unknown_verifier(self, world: World):
        result = _use_case(world).execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=uuid4(),
        )
        assert result.error.code == VerificationErrorCode.VERIFIER_NOT_FOUND

    def test_inactive_verifier_counts_as_not_found(self, world: World):
        result = _verify(world, world.alice, "LUNCH-D1", verifier=world.inactive_staff)
        assert result.error.code == VerificationErrorCode.VERIFIER_NOT_FOUND

    def test_action_from_another_event(self, world: World):
        result = _verify(world, world.alice, "BADGE")

        assert result.error.code == VerificationErrorCode.EVENT_MISMATCH
        assert result.error.details == {
            "participant_event_id": str(world.free_event.id),
            "action_event_id": str(world.other_event.id),
        }
        assert not world.logs.exists(world.alice.id, world.foreign_action.id)

    def test_event_mismatch_wins_over_payment_and_duplicate(self, world: World):
        # Carol tiene pago pendiente y un canje previo del par: igual es mismatch.
        world.logs.create_action_log(
            ActionLog(
                id=uuid4(),
                participant_id=world.carol_unpaid.id,
                action_id=world.lunch.id,
                verified_by=world.staff.id,
                verified_at=FIXED_NOW,
            )
        )
        result = _verify(world, world.carol_unpaid, "LUNCH-D1")
        assert result.error.code == VerificationErrorCode.EVENT_MISMATCH

    def test_future_event_day_is_not_started(self, world: World):
        result = _verify(world, world.alice, "WORKSHOP-D2")

        assert result.error.code == VerificationErrorCode.EVENT_NOT_STARTED
        assert result.error.details == {"event_day": "2026-03-16", "today": "2026-03-15"}

    def test_temporal_gate_uses_event_timezone(self, world: World):
        # 14:00 UTC del 15 ya es 16/03 en Auckland (UTC+13).
        result = _verify(
            world,
            world.alice,
            "WORKSHOP-D2",
            event_zone=ZoneInfo("Pacific/Auckland"),
        )
        assert result.success is True

    def test_missing_event_day_is_skipped_when_fail_open(self, world: World):
        orphan = world.events.add_action(
            EventAction(
                id=uuid4(),
                event_id=world.free_event.id,
                event_day_id=uuid4(),
                name="Orphan",
                code="ORPHAN",
            )
        )
        result = _verify(world, world.alice, orphan.code)
        assert result.success is True

    def test_missing_event_day_fails_when_fail_closed(self, world: World):
        world.events.add_action(
            EventAction(
                id=uuid4(),
                event_id=world.free_event.id,
                event_day_id=uuid4(),
                name="Orphan",
                code="ORPHAN",
            )
        )
        result = _verify(world, world.alice, "ORPHAN", temporal_gate_fail_open=False)
        assert result.error.code == VerificationErrorCode.EVENT_NOT_FOUND

    def test_day_today_is_allowed(self, world: World):
        today = world.events.add_event_day(
            EventDay(
                id=uuid4(),
                event_id=world.free_event.id,
                day_number=3,
                date=date(2026, 3, 15),
            )
        )
        world.events.add_action(
            EventAction(
                id=uuid4(),
                event_id=world.free_event.id,
                event_day_id=today.id,
                name="Keynote",
                code="KEYNOTE",
            )
        )
        assert _verify(world, world.bob, "KEYNOTE").success is True


# =============================================================================
# At-most-once under concurrency
# =============================================================================


class TestConcurrency:
    def test_concurrent_scans_record_exactly_once(self, world: World):
        n = 16
        use_case = _use_case(world)

        def scan(_):
            return use_case.execute(
                credential=world.credential_for(world.bob),
                action_code="LUNCH-D1",
                verifier_id=world.staff.id,
            )

        with ThreadPoolExecutor(max_workers=n) as pool:
            results = list(pool.map(scan, range(n)))

        successes = [r for r in results if r.success]
        failures = [r for r in results if not r.success]

        assert len(successes) == 1
        assert len(failures) == n - 1
        assert all(
            r.error.code == VerificationErrorCode.ALREADY_VERIFIED for r in failures
        )
        assert len(world.logs.list_by_participant(world.bob.id)) == 1

    def test_insert_conflict_is_authoritative(self, world: World):
        """El check previo pasa pero el insert pierde la carrera."""

        class LosingRaceLogs:
            def __init__(self, inner):
                self._inner = inner

            def exists(self, participant_id, action_id):
                return False

            def create_action_log(self, log):
                return False

            def __getattr__(self, name):
                return getattr(self._inner, name)

        use_case = VerifyParticipantActionUseCase(
            world.participants,
            world.events,
            world.users,
            LosingRaceLogs(world.logs),
            clock=fixed_clock,
        )
        result = use_case.execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        assert result.error.code == VerificationErrorCode.ALREADY_VERIFIED


# =============================================================================
# Persistence failures
# =============================================================================


class TestPersistenceErrors:
    def test_store_failure_on_insert(self, world: World):
        class BrokenInsertLogs:
            def __init__(self, inner):
                self._inner = inner

            def create_action_log(self, log):
                raise DatabaseError("connection reset")

            def __getattr__(self, name):
                return getattr(self._inner, name)

        use_case = VerifyParticipantActionUseCase(
            world.participants,
            world.events,
            world.users,
            BrokenInsertLogs(world.logs),
            clock=fixed_clock,
        )
        result = use_case.execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )

        assert result.success is False
        assert result.error.code == VerificationErrorCode.PERSISTENCE_ERROR
        assert isinstance(result.error.cause, DatabaseError)
        assert "connection reset" not in result.error.message

    def test_store_failure_on_lookup(self, world: World):
        class BrokenParticipants:
            def get_participant(self, participant_id):
                raise DatabaseError("timeout")

        use_case = VerifyParticipantActionUseCase(
            BrokenParticipants(),
            world.events,
            world.users,
            world.logs,
            clock=fixed_clock,
        )
        result = use_case.execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        assert result.error.code == VerificationErrorCode.PERSISTENCE_ERROR

    def test_event_day_store_failure_fail_open(self, world: World):
        class BrokenDays:
            def __init__(self, inner):
                self._inner = inner

            def get_event_day(self, event_day_id):
                raise DatabaseError("timeout")

            def __getattr__(self, name):
                return getattr(self._inner, name)

        open_result = VerifyParticipantActionUseCase(
            world.participants,
            BrokenDays(world.events),
            world.users,
            world.logs,
            clock=fixed_clock,
        ).execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        closed_result = VerifyParticipantActionUseCase(
            world.participants,
            BrokenDays(world.events),
            world.users,
            world.logs,
            temporal_gate_fail_open=False,
            clock=fixed_clock,
        ).execute(
            credential=world.credential_for(world.bob),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )

        assert open_result.success is True
        assert closed_result.error.code == VerificationErrorCode.PERSISTENCE_ERROR
