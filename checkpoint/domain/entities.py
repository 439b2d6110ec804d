"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Event, EventDay, EventAction, Participant, ActionLog)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Brindar helpers mínimos (propiedades) para invariantes simples.
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - domain.verification_policy: evalúa gates sobre estas entidades.
    - application/usecases/verification: construyen/consumen estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - ActionLog y ActionLogRevocation son inmutables (append-only).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID


def utcnow() -> datetime:
    """Fecha/hora UTC (aware)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Participant
# ---------------------------------------------------------------------------


class PaymentStatus(str, Enum):
    """Estado de pago del participante."""

    UNPAID = "unpaid"
    PENDING = "pending"
    PAID = "paid"


@dataclass
class Participant:
    """Persona registrada en un evento (portadora de una credencial)."""

    id: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    qr_path: str | None = None
    created_at: datetime | None = None

    @property
    def has_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID


# ---------------------------------------------------------------------------
# Event / EventDay / EventAction
# ---------------------------------------------------------------------------


@dataclass
class Event:
    """Evento con precio de entrada (0 = gratuito)."""

    id: UUID
    title: str
    slug: str | None = None
    ticket_price: Decimal = Decimal("0")
    is_active: bool = True
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        """Un evento es pago si y solo si ticket_price > 0."""
        return self.ticket_price > 0


@dataclass
class EventDay:
    """Día calendario de un evento (day_number 1-based)."""

    id: UUID
    event_id: UUID
    day_number: int
    date: date
    label: str | None = None


@dataclass
class EventAction:
    """Acción canjeable (check-in, almuerzo, kit) ligada a un día del evento."""

    id: UUID
    event_id: UUID
    event_day_id: UUID
    name: str
    code: str
    is_active: bool = True


# ---------------------------------------------------------------------------
# ActionLog (registro de canje) + revocación compensatoria
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionLog:
    """
    Registro inmutable de un canje.

    Invariante (persistencia): UNIQUE (participant_id, action_id).
    """

    id: UUID
    participant_id: UUID
    action_id: UUID
    verified_by: UUID
    verified_at: datetime
    created_at: datetime | None = None


@dataclass(frozen=True)
class ActionLogRevocation:
    """
    Registro compensatorio que anula un ActionLog sin borrarlo.

    Invariante (persistencia): UNIQUE (action_log_id).
    """

    id: UUID
    action_log_id: UUID
    reverted_by: UUID
    reverted_at: datetime
    reason: str | None = None
