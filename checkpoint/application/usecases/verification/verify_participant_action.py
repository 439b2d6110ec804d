"""
===============================================================================
USE CASE: Verify Participant Action (Redemption)
===============================================================================

Name:
    Verify Participant Action Use Case

Business Goal:
    Registrar, como máximo una vez, que un participante canjeó una acción
    (check-in, almuerzo, kit) a partir de la credencial escaneada por staff.

Why (Context / Intención):
    - Varios scanners pueden leer la misma credencial al mismo tiempo: el
      insert atómico (UNIQUE participant_id, action_id) es la única fuente de
      verdad para el duplicado; el chequeo previo solo da un error temprano.
    - Toda falla es un VerificationError tipado (nunca una excepción cruda).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    VerifyParticipantActionUseCase

Responsibilities:
    - Validar inputs (credencial, código de acción, verificador).
    - Resolver la identidad del participante desde la credencial.
    - Evaluar elegibilidad (EligibilityEvaluator).
    - Persistir el ActionLog de forma atómica y construir el resultado.
    - Registrar log estructurado + métrica por outcome.

Collaborators:
    - domain.credentials.resolve_participant_id
    - EligibilityEvaluator
    - ActionLogRepository.create_action_log(log) -> bool
    - crosscutting.metrics.record_verification_outcome
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable, Final
from uuid import UUID, uuid4

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import OUTCOME_SUCCESS, logger, outcome_fields
from ....crosscutting.metrics import record_verification_outcome
from ....domain.credentials import InvalidCredentialError, resolve_participant_id
from ....domain.entities import ActionLog, utcnow
from ....domain.repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
    UserRepository,
)
from .eligibility import EligibilityEvaluator
from .input_validation import require_text, require_uuid
from .verification_results import (
    VerificationError,
    VerificationErrorCode,
    VerifyActionResult,
    persistence_error,
    verification_error,
)

_MSG_SUCCESS: Final[str] = "Successfully verified {action} for participant {participant}"
_MSG_INVALID_CREDENTIAL: Final[str] = "Invalid QR code format."
_MSG_ALREADY_VERIFIED: Final[str] = "Participant has already redeemed this action."


class VerifyParticipantActionUseCase:
    """
    Use Case (Application Service / Command):
        Canjea una acción para el participante identificado por la credencial.
    """

    def __init__(
        self,
        participant_repository: ParticipantRepository,
        event_repository: EventRepository,
        user_repository: UserRepository,
        action_log_repository: ActionLogRepository,
        *,
        event_zone: tzinfo | None = None,
        temporal_gate_fail_open: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._logs = action_log_repository
        self._clock = clock
        self._evaluator = EligibilityEvaluator(
            participant_repository,
            event_repository,
            user_repository,
            action_log_repository,
            event_zone=event_zone,
            temporal_gate_fail_open=temporal_gate_fail_open,
            clock=clock,
        )

    def execute(
        self,
        *,
        credential: str,
        action_code: str,
        verifier_id: UUID | str,
    ) -> VerifyActionResult:
        """
        Ejecuta el canje.

        Reglas:
          - Inputs vacíos o ids inválidos => INVALID_INPUT.
          - Credencial sin identificador => INVALID_CREDENTIAL.
          - Gates en orden (ver EligibilityEvaluator); el primero que falla gana.
          - Conflicto en el insert => ALREADY_VERIFIED.
        """

        # ---------------------------------------------------------------------
        # 1) Validar inputs.
        # ---------------------------------------------------------------------
        raw_credential, error = require_text(credential, "credential")
        if error is not None:
            return self._fail(error, action_code=action_code)

        code, error = require_text(action_code, "action_code")
        if error is not None:
            return self._fail(error, action_code=action_code)

        verifier_uuid, error = require_uuid(verifier_id, "verifier_id")
        if error is not None:
            return self._fail(error, action_code=code)

        # ---------------------------------------------------------------------
        # 2) Resolver identidad desde la credencial (pura, sin I/O).
        # ---------------------------------------------------------------------
        try:
            participant_id = resolve_participant_id(raw_credential)
        except InvalidCredentialError:
            return self._fail(
                verification_error(
                    VerificationErrorCode.INVALID_CREDENTIAL, _MSG_INVALID_CREDENTIAL
                ),
                action_code=code,
                verifier_id=verifier_uuid,
            )

        # ---------------------------------------------------------------------
        # 3) Gates de elegibilidad (orden fijo).
        # ---------------------------------------------------------------------
        outcome = self._evaluator.evaluate(
            participant_id=participant_id,
            verifier_id=verifier_uuid,
            action_code=code,
        )
        if outcome.error is not None:
            return self._fail(
                outcome.error,
                action_code=code,
                verifier_id=verifier_uuid,
                participant_id=participant_id,
            )

        participant, action, event = outcome.participant, outcome.action, outcome.event

        # ---------------------------------------------------------------------
        # 4) Insert atómico (autoritativo para duplicados).
        # ---------------------------------------------------------------------
        now = self._clock()
        log = ActionLog(
            id=uuid4(),
            participant_id=participant.id,
            action_id=action.id,
            verified_by=verifier_uuid,
            verified_at=now,
            created_at=now,
        )
        try:
            created = self._logs.create_action_log(log)
        except DatabaseError as exc:
            return self._fail(
                persistence_error(exc),
                action_code=code,
                verifier_id=verifier_uuid,
                participant_id=participant_id,
            )

        if not created:
            return self._fail(
                verification_error(
                    VerificationErrorCode.ALREADY_VERIFIED, _MSG_ALREADY_VERIFIED
                ),
                action_code=code,
                verifier_id=verifier_uuid,
                participant_id=participant_id,
            )

        # ---------------------------------------------------------------------
        # 5) Resultado + observabilidad.
        # ---------------------------------------------------------------------
        record_verification_outcome(OUTCOME_SUCCESS)
        logger.info(
            "verification recorded",
            extra=outcome_fields(
                OUTCOME_SUCCESS,
                participant_id=participant.id,
                action_code=code,
                verifier_id=verifier_uuid,
                redemption_id=log.id,
            ),
        )

        return VerifyActionResult(
            success=True,
            message=_MSG_SUCCESS.format(action=action.name, participant=participant.name),
            redemption_id=log.id,
            participant_name=participant.name,
            action_name=action.name,
            event_title=event.title,
            timestamp=log.verified_at,
            log=log,
        )

    # =========================================================================
    # Helpers privados
    # =========================================================================

    @staticmethod
    def _fail(
        error: VerificationError,
        *,
        action_code: str | None,
        verifier_id: UUID | None = None,
        participant_id: UUID | None = None,
    ) -> VerifyActionResult:
        """Loguea, cuenta y devuelve el resultado de falla."""
        record_verification_outcome(error.code.value)

        extra = outcome_fields(
            error.code.value,
            participant_id=participant_id,
            action_code=action_code,
            verifier_id=verifier_id,
        )
        if error.code == VerificationErrorCode.PERSISTENCE_ERROR:
            logger.error(
                "verification failed on store",
                exc_info=error.cause,
                extra=extra,
            )
        else:
            logger.info("verification rejected", extra=extra)

        return VerifyActionResult(success=False, message=error.message, error=error)
