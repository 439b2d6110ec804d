"""
===============================================================================
USE CASE: Get Daily Verifications (per Event)
===============================================================================

Name:
    Get Daily Verifications Use Case

Business Goal:
    Serie diaria de canjes de un evento para los últimos N días (incluye hoy),
    con los días sin actividad en cero.

Why (Context / Intención):
    - El repositorio solo devuelve días con actividad; completar la serie acá
      evita que cada cliente tenga que rellenar huecos.
    - Los días se cortan en la zona horaria del evento.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    GetDailyVerificationsUseCase

Responsibilities:
    - Validar days en [1, max_days] (INVALID_INPUT).
    - Validar evento (EVENT_NOT_FOUND).
    - Completar días faltantes con count=0, orden ascendente.

Collaborators:
    - EventRepository.get_event
    - ActionLogRepository.count_daily
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Callable, Final
from uuid import UUID
from zoneinfo import ZoneInfo

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import utcnow
from ....domain.repositories import ActionLogRepository, EventRepository
from ....domain.value_objects import DailyVerificationCount
from ....domain.verification_policy import local_today
from .get_verification_stats import zone_name
from .input_validation import require_uuid
from .verification_results import (
    DailyVerificationsResult,
    VerificationErrorCode,
    persistence_error,
    verification_error,
)

DEFAULT_DAYS: Final[int] = 30
MAX_DAYS: Final[int] = 365

_MSG_EVENT_NOT_FOUND: Final[str] = "Event not found."
_MSG_INVALID_DAYS: Final[str] = "days must be between 1 and {max_days}."


class GetDailyVerificationsUseCase:
    """Conteo diario de canjes (excluye revertidos)."""

    def __init__(
        self,
        event_repository: EventRepository,
        action_log_repository: ActionLogRepository,
        *,
        event_zone: tzinfo | None = None,
        max_days: int = MAX_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = event_repository
        self._logs = action_log_repository
        self._zone = event_zone or ZoneInfo("UTC")
        self._max_days = max_days
        self._clock = clock

    def execute(
        self, event_id: UUID | str, days: int = DEFAULT_DAYS
    ) -> DailyVerificationsResult:
        event_uuid, error = require_uuid(event_id, "event_id")
        if error is not None:
            return DailyVerificationsResult(error=error)

        if days < 1 or days > self._max_days:
            return DailyVerificationsResult(
                error=verification_error(
                    VerificationErrorCode.INVALID_INPUT,
                    _MSG_INVALID_DAYS.format(max_days=self._max_days),
                    details={"field": "days"},
                )
            )

        today = local_today(self._clock(), self._zone)
        since = today - timedelta(days=days - 1)

        try:
            if self._events.get_event(event_uuid) is None:
                return DailyVerificationsResult(
                    error=verification_error(
                        VerificationErrorCode.EVENT_NOT_FOUND, _MSG_EVENT_NOT_FOUND
                    )
                )
            rows = self._logs.count_daily(
                event_uuid, since=since, tz_name=zone_name(self._zone)
            )
        except DatabaseError as exc:
            logger.exception(
                "daily verifications failed on store",
                extra={"event_id": str(event_uuid), "error_id": exc.error_id},
            )
            return DailyVerificationsResult(error=persistence_error(exc))

        counts = {day: count for day, count in rows}
        series = [
            DailyVerificationCount(
                day=since + timedelta(days=offset),
                count=counts.get(since + timedelta(days=offset), 0),
            )
            for offset in range(days)
        ]
        return DailyVerificationsResult(days=series)
