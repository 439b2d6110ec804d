"""
===============================================================================
TARJETA CRC — domain/verification_policy.py
===============================================================================

Módulo:
    Política de Verificación (gates puros de elegibilidad)

Responsabilidades:
    - Definir reglas puras de canje (sin DB, sin FastAPI, sin reloj global).
    - Separar "policy" de "repos" (repos solo traen datos, policy decide).
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - domain.entities: Participant, Event, EventAction, EventDay
    - identity.users: User
    - application/usecases/verification/eligibility.py: evalúa los gates en orden.

Reglas (intención):
    - Un participante solo canjea acciones de SU evento.
    - Evento pago => el participante debe estar "paid".
    - Una acción ligada a un día no se canjea antes de ese día.
    - Solo un usuario activo puede verificar; solo admin puede revertir.
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo

from ..identity.users import User
from .entities import Event, EventAction, EventDay, Participant


def is_active_staff(user: User | None) -> bool:
    """Usuario existente y activo (los inactivos cuentan como inexistentes)."""
    return user is not None and user.is_active


def can_revert(user: User | None) -> bool:
    return is_active_staff(user) and user.is_admin


def belongs_to_same_event(participant: Participant, action: EventAction) -> bool:
    return participant.event_id == action.event_id


def is_payment_satisfied(participant: Participant, event: Event) -> bool:
    """Eventos gratuitos no exigen pago; pagos exigen status == paid."""
    if not event.is_paid:
        return True
    return participant.has_paid


def has_event_day_started(event_day: EventDay, today: date) -> bool:
    """El día del evento ya llegó (mismo día cuenta como iniciado)."""
    return event_day.date <= today


def local_today(now: datetime, zone: tzinfo) -> date:
    """Fecha calendario de `now` en la zona del evento."""
    return now.astimezone(zone).date()
