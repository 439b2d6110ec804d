"""
Name: RevertVerificationUseCase Unit Tests

Responsibilities:
  - Validate admin-only authorization
  - Validate at-most-once revocation (compensating record)
  - Validate the original log stays and the slot stays consumed
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest
from seed import FIXED_NOW, World, fixed_clock

from checkpoint.application.usecases.verification import (
    RevertVerificationUseCase,
    VerificationErrorCode,
    VerifyParticipantActionUseCase,
)
from checkpoint.crosscutting.exceptions import DatabaseError

pytestmark = pytest.mark.unit


def _redeem(world: World, participant=None, code: str = "LUNCH-D1"):
    participant = participant or world.alice
    result = VerifyParticipantActionUseCase(
        world.participants, world.events, world.users, world.logs, clock=fixed_clock
    ).execute(
        credential=world.credential_for(participant),
        action_code=code,
        verifier_id=world.staff.id,
    )
    assert result.success is True
    return result.log


def _revert(world: World, log_id, admin=None, reason=None, logs=None):
    return RevertVerificationUseCase(
        world.users, logs or world.logs, clock=fixed_clock
    ).execute(
        verification_id=log_id,
        admin_id=(admin or world.admin).id,
        reason=reason,
    )


class TestRevertVerification:
    def test_admin_reverts_and_log_is_kept(self, world: World):
        log = _redeem(world)

        result = _revert(world, log.id, reason="  scanned the wrong badge  ")

        assert result.error is None
        assert result.revocation.action_log_id == log.id
        assert result.revocation.reverted_by == world.admin.id
        assert result.revocation.reverted_at == FIXED_NOW
        assert result.revocation.reason == "scanned the wrong badge"
        assert world.logs.get_action_log(log.id) == log

        history = world.logs.list_by_participant(world.alice.id)
        assert history[0].is_reverted is True

    def test_second_revert_is_rejected(self, world: World):
        log = _redeem(world)
        assert _revert(world, log.id).error is None

        result = _revert(world, log.id)
        assert result.error.code == VerificationErrorCode.ALREADY_REVERTED

    def test_concurrent_reverts_produce_single_revocation(self, world: World):
        log = _redeem(world)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: _revert(world, log.id), range(8)))

        assert sum(1 for r in results if r.error is None) == 1
        assert {
            r.error.code for r in results if r.error is not None
        } == {VerificationErrorCode.ALREADY_REVERTED}

    def test_slot_stays_consumed_after_revert(self, world: World):
        log = _redeem(world)
        _revert(world, log.id)

        again = VerifyParticipantActionUseCase(
            world.participants, world.events, world.users, world.logs, clock=fixed_clock
        ).execute(
            credential=world.credential_for(world.alice),
            action_code="LUNCH-D1",
            verifier_id=world.staff.id,
        )
        assert again.error.code == VerificationErrorCode.ALREADY_VERIFIED

    @pytest.mark.parametrize("role_user", ["staff", "organizer"])
    def test_non_admin_is_denied(self, world: World, role_user):
        log = _redeem(world)

        result = _revert(world, log.id, admin=getattr(world, role_user))

        assert result.error.code == VerificationErrorCode.PERMISSION_DENIED
        assert result.error.details == {"role": role_user}
        assert world.logs.list_by_participant(world.alice.id)[0].is_reverted is False

    def test_unknown_admin(self, world: World):
        log = _redeem(world)
        result = RevertVerificationUseCase(world.users, world.logs).execute(
            verification_id=log.id, admin_id=uuid4()
        )
        assert result.error.code == VerificationErrorCode.VERIFIER_NOT_FOUND

    def test_unknown_verification(self, world: World):
        result = _revert(world, uuid4())
        assert result.error.code == VerificationErrorCode.VERIFICATION_NOT_FOUND

    def test_invalid_verification_id(self, world: World):
        result = _revert(world, "not-a-uuid")
        assert result.error.code == VerificationErrorCode.INVALID_INPUT

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_blank_reason_is_stored_as_none(self, world: World, reason):
        log = _redeem(world)
        assert _revert(world, log.id, reason=reason).revocation.reason is None

    def test_long_reason_is_truncated(self, world: World):
        log = _redeem(world)
        result = _revert(world, log.id, reason="x" * 800)
        assert len(result.revocation.reason) == 500

    def test_store_failure(self, world: World):
        log = _redeem(world)

        class BrokenLogs:
            def get_action_log(self, log_id):
                return log

            def create_revocation(self, revocation):
                raise DatabaseError("connection reset")

        result = _revert(world, log.id, logs=BrokenLogs())
        assert result.error.code == VerificationErrorCode.PERSISTENCE_ERROR
        assert isinstance(result.error.cause, DatabaseError)
