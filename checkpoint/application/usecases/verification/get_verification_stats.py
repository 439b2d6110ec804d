"""
===============================================================================
USE CASE: Get Verification Stats (per Event)
===============================================================================

Name:
    Get Verification Stats Use Case

Business Goal:
    Resumir la actividad de canje de un evento: totales, participantes
    únicos, tasa de verificación, acción y verificador más activos.

Why (Context / Intención):
    - Los logs revertidos NO cuentan en ninguna métrica.
    - "Hoy" se define en la zona horaria del evento, no en UTC.
    - El repositorio devuelve agregados crudos; aquí se derivan tasa y promedio
      para que la regla viva en un solo lugar (Postgres e in-memory).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    GetVerificationStatsUseCase

Responsibilities:
    - Validar evento (EVENT_NOT_FOUND).
    - Calcular ventana [inicio, fin) de "hoy" en la zona del evento.
    - Derivar verification_rate y average_daily_verifications.

Collaborators:
    - EventRepository.get_event
    - ParticipantRepository.count_participants_by_event
    - ActionLogRepository.get_event_aggregates
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Final, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import utcnow
from ....domain.repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
)
from ....domain.value_objects import VerificationStats
from ....domain.verification_policy import local_today
from .input_validation import require_uuid
from .verification_results import (
    VerificationErrorCode,
    VerificationStatsResult,
    persistence_error,
    verification_error,
)

_MSG_EVENT_NOT_FOUND: Final[str] = "Event not found."


def today_window(now: datetime, zone: tzinfo) -> Tuple[datetime, datetime]:
    """[00:00, 24:00) del día local de `now`, expresado en UTC."""
    today = local_today(now, zone)
    start = datetime.combine(today, time.min, tzinfo=zone)
    end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def zone_name(zone: tzinfo) -> str:
    return getattr(zone, "key", None) or "UTC"


class GetVerificationStatsUseCase:
    """Estadísticas de canje de un evento (excluye revertidos)."""

    def __init__(
        self,
        event_repository: EventRepository,
        participant_repository: ParticipantRepository,
        action_log_repository: ActionLogRepository,
        *,
        event_zone: tzinfo | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = event_repository
        self._participants = participant_repository
        self._logs = action_log_repository
        self._zone = event_zone or ZoneInfo("UTC")
        self._clock = clock

    def execute(self, event_id: UUID | str) -> VerificationStatsResult:
        event_uuid, error = require_uuid(event_id, "event_id")
        if error is not None:
            return VerificationStatsResult(error=error)

        day_start, day_end = today_window(self._clock(), self._zone)

        try:
            # -----------------------------------------------------------------
            # 1) Evento debe existir.
            # -----------------------------------------------------------------
            if self._events.get_event(event_uuid) is None:
                return VerificationStatsResult(
                    error=verification_error(
                        VerificationErrorCode.EVENT_NOT_FOUND, _MSG_EVENT_NOT_FOUND
                    )
                )

            # -----------------------------------------------------------------
            # 2) Agregados crudos + denominador.
            # -----------------------------------------------------------------
            aggregates = self._logs.get_event_aggregates(
                event_uuid,
                day_start=day_start,
                day_end=day_end,
                tz_name=zone_name(self._zone),
            )
            total_participants = self._participants.count_participants_by_event(
                event_uuid
            )
        except DatabaseError as exc:
            logger.exception(
                "verification stats failed on store",
                extra={"event_id": str(event_uuid), "error_id": exc.error_id},
            )
            return VerificationStatsResult(error=persistence_error(exc))

        # ---------------------------------------------------------------------
        # 3) Derivados.
        # ---------------------------------------------------------------------
        total = aggregates.total_verifications
        rate = total / total_participants if total_participants > 0 else 0.0
        average = (
            total / aggregates.distinct_days if aggregates.distinct_days > 0 else 0.0
        )

        return VerificationStatsResult(
            stats=VerificationStats(
                event_id=event_uuid,
                total_verifications=total,
                unique_participants=aggregates.unique_participants,
                total_participants=total_participants,
                verification_rate=rate,
                most_verified_action=aggregates.most_verified_action,
                top_verifier=aggregates.top_verifier,
                last_verification=aggregates.last_verification,
                today_verifications=aggregates.today_verifications,
                average_daily_verifications=average,
            )
        )
