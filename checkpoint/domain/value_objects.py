"""
===============================================================================
TARJETA CRC — domain/value_objects.py
===============================================================================

Módulo:
    Objetos de valor y read-models de verificación

Responsabilidades:
    - Representar filtros de listado (VerificationFilters).
    - Representar vistas de lectura (VerificationRecord, VerificationStats,
      DailyVerificationCount, EventVerificationAggregates).
    - Mantener estos tipos inmutables y fáciles de serializar.

Colaboradores:
    - domain.repositories.ActionLogRepository: produce los read-models.
    - application/usecases/verification: los consume y completa.
    - interfaces/api/http/schemas: los mapea a DTOs HTTP.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class VerificationFilters:
    """
    Filtros del listado de verificaciones de un evento.

    - date_from/date_to: rango inclusivo sobre verified_at.
    - page/page_size: se normalizan en el caso de uso.
    """

    date_from: datetime | None = None
    date_to: datetime | None = None
    action_id: UUID | None = None
    verifier_id: UUID | None = None
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class VerificationRecord:
    """ActionLog enriquecido con nombres (vista de historial/listado)."""

    id: UUID
    participant_id: UUID
    participant_name: str
    action_id: UUID
    action_name: str
    action_code: str
    event_id: UUID
    event_title: str
    verified_by: UUID
    verifier_email: str | None
    verified_at: datetime
    reverted_at: datetime | None = None

    @property
    def is_reverted(self) -> bool:
        return self.reverted_at is not None


@dataclass(frozen=True)
class EventVerificationAggregates:
    """
    Agregados crudos de un evento (solo logs NO revertidos).

    El caso de uso deriva tasas y promedios a partir de estos valores.
    """

    total_verifications: int = 0
    unique_participants: int = 0
    most_verified_action: str | None = None
    top_verifier: str | None = None
    last_verification: datetime | None = None
    today_verifications: int = 0
    distinct_days: int = 0


@dataclass(frozen=True)
class VerificationStats:
    """Estadísticas de verificación de un evento."""

    event_id: UUID
    total_verifications: int
    unique_participants: int
    total_participants: int
    verification_rate: float
    most_verified_action: str | None
    top_verifier: str | None
    last_verification: datetime | None
    today_verifications: int
    average_daily_verifications: float


@dataclass(frozen=True)
class DailyVerificationCount:
    day: date
    count: int
