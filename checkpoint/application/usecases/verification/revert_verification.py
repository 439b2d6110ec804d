"""
===============================================================================
USE CASE: Revert Verification (Administrative Revocation)
===============================================================================

Name:
    Revert Verification Use Case

Business Goal:
    Permitir que un administrador anule un canje registrado por error, sin
    borrar ni modificar el ActionLog original.

Why (Context / Intención):
    - Los ActionLog son inmutables: la reversión agrega un registro
      compensatorio (ActionLogRevocation) y deja auditoría completa.
    - El par (participante, acción) sigue consumido: at-most-once es absoluto.
    - Los logs revertidos se marcan en historial/listados y se excluyen de stats.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RevertVerificationUseCase

Responsibilities:
    - Validar ids (INVALID_INPUT).
    - Autorizar: admin existente y activo (VERIFIER_NOT_FOUND), rol admin
      (PERMISSION_DENIED).
    - Validar existencia del log (VERIFICATION_NOT_FOUND).
    - Insertar la revocación de forma atómica (ALREADY_REVERTED en conflicto).

Collaborators:
    - UserRepository.get_user_by_id
    - ActionLogRepository.get_action_log / create_revocation
    - domain.verification_policy.can_revert
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Final
from uuid import UUID, uuid4

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import OUTCOME_SUCCESS, logger, outcome_fields
from ....crosscutting.metrics import record_revocation_outcome
from ....domain.entities import ActionLogRevocation, utcnow
from ....domain.repositories import ActionLogRepository, UserRepository
from ....domain.verification_policy import can_revert, is_active_staff
from .input_validation import require_uuid
from .verification_results import (
    RevertVerificationResult,
    VerificationError,
    VerificationErrorCode,
    persistence_error,
    verification_error,
)

_MSG_ADMIN_NOT_FOUND: Final[str] = "Admin user not found."
_MSG_PERMISSION_DENIED: Final[str] = "Only administrators can revert verifications."
_MSG_VERIFICATION_NOT_FOUND: Final[str] = "Verification not found."
_MSG_ALREADY_REVERTED: Final[str] = "Verification has already been reverted."
_REASON_MAX_LEN: Final[int] = 500


class RevertVerificationUseCase:
    """
    Use Case (Application Service / Command):
        Revoca un canje agregando un registro compensatorio.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        action_log_repository: ActionLogRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = user_repository
        self._logs = action_log_repository
        self._clock = clock

    def execute(
        self,
        *,
        verification_id: UUID | str,
        admin_id: UUID | str,
        reason: str | None = None,
    ) -> RevertVerificationResult:
        # ---------------------------------------------------------------------
        # 1) Validar inputs.
        # ---------------------------------------------------------------------
        log_id, error = require_uuid(verification_id, "verification_id")
        if error is not None:
            return self._fail(error)

        admin_uuid, error = require_uuid(admin_id, "admin_id")
        if error is not None:
            return self._fail(error)

        try:
            # -----------------------------------------------------------------
            # 2) Autorización: admin activo.
            # -----------------------------------------------------------------
            admin = self._users.get_user_by_id(admin_uuid)
            if not is_active_staff(admin):
                return self._fail(
                    verification_error(
                        VerificationErrorCode.VERIFIER_NOT_FOUND, _MSG_ADMIN_NOT_FOUND
                    )
                )
            if not can_revert(admin):
                return self._fail(
                    verification_error(
                        VerificationErrorCode.PERMISSION_DENIED,
                        _MSG_PERMISSION_DENIED,
                        details={"role": admin.role.value},
                    )
                )

            # -----------------------------------------------------------------
            # 3) El log debe existir.
            # -----------------------------------------------------------------
            if self._logs.get_action_log(log_id) is None:
                return self._fail(
                    verification_error(
                        VerificationErrorCode.VERIFICATION_NOT_FOUND,
                        _MSG_VERIFICATION_NOT_FOUND,
                    )
                )

            # -----------------------------------------------------------------
            # 4) Registro compensatorio (único por log).
            # -----------------------------------------------------------------
            revocation = ActionLogRevocation(
                id=uuid4(),
                action_log_id=log_id,
                reverted_by=admin_uuid,
                reverted_at=self._clock(),
                reason=_clean_reason(reason),
            )
            created = self._logs.create_revocation(revocation)
        except DatabaseError as exc:
            return self._fail(persistence_error(exc))

        if not created:
            return self._fail(
                verification_error(
                    VerificationErrorCode.ALREADY_REVERTED, _MSG_ALREADY_REVERTED
                )
            )

        record_revocation_outcome(OUTCOME_SUCCESS)
        logger.info(
            "verification reverted",
            extra=outcome_fields(
                OUTCOME_SUCCESS,
                verification_id=log_id,
                admin_id=admin_uuid,
                revocation_id=revocation.id,
            ),
        )
        return RevertVerificationResult(revocation=revocation)

    @staticmethod
    def _fail(error: VerificationError) -> RevertVerificationResult:
        record_revocation_outcome(error.code.value)
        if error.code == VerificationErrorCode.PERSISTENCE_ERROR:
            logger.error(
                "revert failed on store",
                exc_info=error.cause,
                extra=outcome_fields(error.code.value),
            )
        else:
            logger.info("revert rejected", extra=outcome_fields(error.code.value))
        return RevertVerificationResult(error=error)


def _clean_reason(reason: str | None) -> str | None:
    text = (reason or "").strip()
    if not text:
        return None
    return text[:_REASON_MAX_LEN]
