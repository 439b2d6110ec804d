"""
===============================================================================
USE CASE: Get Participant History
===============================================================================

Name:
    Get Participant History Use Case

Business Goal:
    Listar todos los canjes de un participante (más reciente primero),
    marcando los que fueron revertidos.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    GetParticipantHistoryUseCase

Responsibilities:
    - Validar que el participante exista (PARTICIPANT_NOT_FOUND).
    - Delegar la lectura ordenada al ActionLogRepository.
    - Traducir DatabaseError a PERSISTENCE_ERROR.

Collaborators:
    - ParticipantRepository.get_participant
    - ActionLogRepository.list_by_participant
===============================================================================
"""

from __future__ import annotations

from typing import Final
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.repositories import ActionLogRepository, ParticipantRepository
from .input_validation import require_uuid
from .verification_results import (
    ParticipantHistoryResult,
    VerificationErrorCode,
    persistence_error,
    verification_error,
)

_MSG_PARTICIPANT_NOT_FOUND: Final[str] = "Participant not found."


class GetParticipantHistoryUseCase:
    """Historial de canjes de un participante (verified_at DESC)."""

    def __init__(
        self,
        participant_repository: ParticipantRepository,
        action_log_repository: ActionLogRepository,
    ) -> None:
        self._participants = participant_repository
        self._logs = action_log_repository

    def execute(self, participant_id: UUID | str) -> ParticipantHistoryResult:
        participant_uuid, error = require_uuid(participant_id, "participant_id")
        if error is not None:
            return ParticipantHistoryResult(error=error)

        try:
            if self._participants.get_participant(participant_uuid) is None:
                return ParticipantHistoryResult(
                    error=verification_error(
                        VerificationErrorCode.PARTICIPANT_NOT_FOUND,
                        _MSG_PARTICIPANT_NOT_FOUND,
                    )
                )
            records = self._logs.list_by_participant(participant_uuid)
        except DatabaseError as exc:
            logger.exception(
                "participant history failed on store",
                extra={"participant_id": str(participant_uuid), "error_id": exc.error_id},
            )
            return ParticipantHistoryResult(error=persistence_error(exc))

        return ParticipantHistoryResult(records=records)
