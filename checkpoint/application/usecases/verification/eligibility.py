"""
===============================================================================
ELIGIBILITY EVALUATOR (Ordered Gate Evaluation)
===============================================================================

Name:
    Eligibility Evaluator

Business Goal:
    Decidir si un participante puede canjear una acción, evaluando los gates
    en un orden fijo y devolviendo el PRIMER motivo de rechazo.

Why (Context / Intención):
    - El canje real y el dry-run (canVerify) deben decidir exactamente igual:
      comparten este evaluador.
    - Los gates baratos y sin I/O (consistencia de evento) van antes que los
      que consultan el store (pago, duplicado, día del evento).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    EligibilityEvaluator

Responsibilities:
    - Gate 1: existencia (participante, acción activa, verificador activo).
    - Gate 2: consistencia de evento (acción y participante del mismo evento).
    - Gate 3: pago (evento pago => payment_status == paid).
    - Gate 4: duplicado (ya existe log para el par).
    - Gate 5: temporal (el día de la acción ya llegó en la zona del evento).
    - Traducir DatabaseError a PERSISTENCE_ERROR.

Collaborators:
    - ParticipantRepository / EventRepository / UserRepository / ActionLogRepository
    - domain.verification_policy (reglas puras)
    - action_lookup (resolución de acción)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Callable, Final
from uuid import UUID
from zoneinfo import ZoneInfo

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import Event, EventAction, Participant, utcnow
from ....domain.repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
    UserRepository,
)
from ....domain.verification_policy import (
    belongs_to_same_event,
    has_event_day_started,
    is_active_staff,
    is_payment_satisfied,
    local_today,
)
from ....identity.users import User
from .action_lookup import resolve_active_action, resolve_active_action_by_id
from .verification_results import (
    VerificationError,
    VerificationErrorCode,
    persistence_error,
    verification_error,
)

_MSG_PARTICIPANT_NOT_FOUND: Final[str] = "Participant not found."
_MSG_VERIFIER_NOT_FOUND: Final[str] = "Verifier not found."
_MSG_EVENT_MISMATCH: Final[str] = "Action does not belong to the participant's event."
_MSG_EVENT_NOT_FOUND: Final[str] = "Event not found."
_MSG_EVENT_DAY_NOT_FOUND: Final[str] = "Event day not found."
_MSG_PAYMENT_REQUIRED: Final[str] = "Payment required. Current status: {status}"
_MSG_ALREADY_VERIFIED: Final[str] = "Participant has already redeemed this action."
_MSG_EVENT_NOT_STARTED: Final[str] = "Event day has not started yet."


@dataclass
class EligibilityOutcome:
    """
    Resultado interno del evaluador.

    - error == None: todos los gates pasaron; las entidades quedan resueltas
      para que el caso de uso no vuelva a consultarlas.
    """

    participant: Participant | None = None
    action: EventAction | None = None
    event: Event | None = None
    verifier: User | None = None
    error: VerificationError | None = None


class EligibilityEvaluator:
    """Evalúa los gates de canje en orden fijo (primer fallo gana)."""

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
        self._participants = participant_repository
        self._events = event_repository
        self._users = user_repository
        self._logs = action_log_repository
        self._zone = event_zone or ZoneInfo("UTC")
        self._fail_open = temporal_gate_fail_open
        self._clock = clock

    def evaluate(
        self,
        *,
        participant_id: UUID,
        verifier_id: UUID | None,
        action_code: str | None = None,
        action_id: UUID | None = None,
    ) -> EligibilityOutcome:
        """
        Evalúa los gates para (participante, acción, verificador).

        La acción se identifica por `action_code` (canje) o `action_id`
        (dry-run). `verifier_id=None` omite el chequeo del verificador.
        """
        try:
            return self._evaluate(
                participant_id=participant_id,
                verifier_id=verifier_id,
                action_code=action_code,
                action_id=action_id,
            )
        except DatabaseError as exc:
            logger.exception(
                "eligibility evaluation failed on store",
                extra={"participant_id": str(participant_id), "error_id": exc.error_id},
            )
            return EligibilityOutcome(error=persistence_error(exc))

    # =========================================================================
    # Gates
    # =========================================================================

    def _evaluate(
        self,
        *,
        participant_id: UUID,
        verifier_id: UUID | None,
        action_code: str | None,
        action_id: UUID | None,
    ) -> EligibilityOutcome:
        # ---------------------------------------------------------------------
        # 1) Existencia: participante, acción (activa), verificador (activo).
        # ---------------------------------------------------------------------
        participant = self._participants.get_participant(participant_id)
        if participant is None:
            return EligibilityOutcome(
                error=verification_error(
                    VerificationErrorCode.PARTICIPANT_NOT_FOUND,
                    _MSG_PARTICIPANT_NOT_FOUND,
                )
            )

        if action_code is not None:
            action, action_error = resolve_active_action(self._events, action_code)
        else:
            action, action_error = resolve_active_action_by_id(self._events, action_id)
        if action_error is not None:
            return EligibilityOutcome(participant=participant, error=action_error)

        verifier: User | None = None
        if verifier_id is not None:
            verifier = self._users.get_user_by_id(verifier_id)
            if not is_active_staff(verifier):
                return EligibilityOutcome(
                    participant=participant,
                    action=action,
                    error=verification_error(
                        VerificationErrorCode.VERIFIER_NOT_FOUND,
                        _MSG_VERIFIER_NOT_FOUND,
                    ),
                )

        outcome = EligibilityOutcome(
            participant=participant, action=action, verifier=verifier
        )

        # ---------------------------------------------------------------------
        # 2) Consistencia de evento (sin I/O).
        # ---------------------------------------------------------------------
        if not belongs_to_same_event(participant, action):
            outcome.error = verification_error(
                VerificationErrorCode.EVENT_MISMATCH,
                _MSG_EVENT_MISMATCH,
                details={
                    "participant_event_id": str(participant.event_id),
                    "action_event_id": str(action.event_id),
                },
            )
            return outcome

        # ---------------------------------------------------------------------
        # 3) Pago: el evento debe existir para decidir si es pago.
        # ---------------------------------------------------------------------
        event = self._events.get_event(participant.event_id)
        if event is None:
            outcome.error = verification_error(
                VerificationErrorCode.EVENT_NOT_FOUND, _MSG_EVENT_NOT_FOUND
            )
            return outcome
        outcome.event = event

        if not is_payment_satisfied(participant, event):
            status = participant.payment_status.value
            outcome.error = verification_error(
                VerificationErrorCode.PAYMENT_REQUIRED,
                _MSG_PAYMENT_REQUIRED.format(status=status),
                details={"payment_status": status},
            )
            return outcome

        # ---------------------------------------------------------------------
        # 4) Duplicado (early check; el insert atómico es el autoritativo).
        # ---------------------------------------------------------------------
        if self._logs.exists(participant.id, action.id):
            outcome.error = verification_error(
                VerificationErrorCode.ALREADY_VERIFIED, _MSG_ALREADY_VERIFIED
            )
            return outcome

        # ---------------------------------------------------------------------
        # 5) Temporal: el día de la acción ya llegó (zona del evento).
        # ---------------------------------------------------------------------
        outcome.error = self._check_event_day(action)
        return outcome

    def _check_event_day(self, action: EventAction) -> VerificationError | None:
        try:
            event_day = self._events.get_event_day(action.event_day_id)
        except DatabaseError as exc:
            if self._fail_open:
                logger.warning(
                    "event day lookup failed; temporal gate skipped",
                    extra={"action_id": str(action.id), "error_id": exc.error_id},
                )
                return None
            return persistence_error(exc)

        if event_day is None:
            if self._fail_open:
                logger.warning(
                    "event day not found; temporal gate skipped",
                    extra={
                        "action_id": str(action.id),
                        "event_day_id": str(action.event_day_id),
                    },
                )
                return None
            return verification_error(
                VerificationErrorCode.EVENT_NOT_FOUND, _MSG_EVENT_DAY_NOT_FOUND
            )

        today = local_today(self._clock(), self._zone)
        if not has_event_day_started(event_day, today):
            return verification_error(
                VerificationErrorCode.EVENT_NOT_STARTED,
                _MSG_EVENT_NOT_STARTED,
                details={
                    "event_day": event_day.date.isoformat(),
                    "today": today.isoformat(),
                },
            )
        return None
