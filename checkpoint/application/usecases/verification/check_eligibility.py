"""
===============================================================================
USE CASE: Check Eligibility (Dry-Run)
===============================================================================

Name:
    Check Eligibility Use Case

Business Goal:
    Responder "¿se podría canjear esta acción para este participante?" sin
    registrar nada, para que el scanner muestre el estado antes de confirmar.

Why (Context / Intención):
    - Reusa el mismo EligibilityEvaluator que el canje real: la respuesta del
      dry-run coincide con lo que haría verify en ese instante.
    - No hay verificador en el dry-run: el gate del verificador se omite.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CheckEligibilityUseCase

Responsibilities:
    - Validar ids (INVALID_INPUT).
    - Evaluar gates y devolver EligibilityResult (eligible + primer motivo).

Collaborators:
    - EligibilityEvaluator
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable
from uuid import UUID

from ....domain.entities import utcnow
from ....domain.repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
    UserRepository,
)
from .eligibility import EligibilityEvaluator
from .input_validation import require_uuid
from .verification_results import EligibilityResult


class CheckEligibilityUseCase:
    """
    Use Case (Application Service / Query):
        Dry-run de los gates de canje. Nunca escribe.
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
        self, participant_id: UUID | str, action_id: UUID | str
    ) -> EligibilityResult:
        participant_uuid, error = require_uuid(participant_id, "participant_id")
        if error is not None:
            return EligibilityResult(eligible=False, error=error)

        action_uuid, error = require_uuid(action_id, "action_id")
        if error is not None:
            return EligibilityResult(eligible=False, error=error)

        outcome = self._evaluator.evaluate(
            participant_id=participant_uuid,
            verifier_id=None,
            action_id=action_uuid,
        )
        return EligibilityResult(eligible=outcome.error is None, error=outcome.error)
