"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/event.py
============================================================
Class: PostgresEventRepository

Responsibilities:
  - Leer eventos, días de evento y el registro de acciones.
  - Resolver acciones por código exacto (índice único en event_actions.code).

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - Tablas: events, event_days, event_actions

Constraints / Notes:
  - Solo lectura: el CRUD de eventos vive en otro servicio.
  - ticket_price se lee como Decimal (NUMERIC) para no perder precisión.
============================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from ....domain.entities import Event, EventAction, EventDay
from ._base import PostgresRepositoryBase

_EVENT_COLUMNS = "id, title, slug, ticket_price, is_active, starts_at, ends_at"
_EVENT_DAY_COLUMNS = "id, event_id, day_number, date, label"
_ACTION_COLUMNS = "id, event_id, event_day_id, name, code, is_active"


def _row_to_event(row: tuple) -> Event:
    return Event(
        id=row[0],
        title=row[1],
        slug=row[2],
        ticket_price=Decimal(row[3] if row[3] is not None else 0),
        is_active=bool(row[4]),
        starts_at=row[5],
        ends_at=row[6],
    )


def _row_to_event_day(row: tuple) -> EventDay:
    return EventDay(
        id=row[0], event_id=row[1], day_number=row[2], date=row[3], label=row[4]
    )


def _row_to_action(row: tuple) -> EventAction:
    return EventAction(
        id=row[0],
        event_id=row[1],
        event_day_id=row[2],
        name=row[3],
        code=row[4],
        is_active=bool(row[5]),
    )


class PostgresEventRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL (solo lectura) de eventos y acciones."""

    _SQL_GET_EVENT = f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = %s"
    _SQL_GET_EVENT_DAY = f"SELECT {_EVENT_DAY_COLUMNS} FROM event_days WHERE id = %s"
    _SQL_GET_ACTION = f"SELECT {_ACTION_COLUMNS} FROM event_actions WHERE id = %s"
    _SQL_GET_ACTION_BY_CODE = (
        f"SELECT {_ACTION_COLUMNS} FROM event_actions WHERE code = %s"
    )

    def get_event(self, event_id: UUID) -> Optional[Event]:
        row = self._fetchone(
            query=self._SQL_GET_EVENT,
            params=[event_id],
            context_msg="PostgresEventRepository: get_event failed",
            extra={"event_id": str(event_id)},
        )
        return _row_to_event(row) if row else None

    def get_event_day(self, event_day_id: UUID) -> Optional[EventDay]:
        row = self._fetchone(
            query=self._SQL_GET_EVENT_DAY,
            params=[event_day_id],
            context_msg="PostgresEventRepository: get_event_day failed",
            extra={"event_day_id": str(event_day_id)},
        )
        return _row_to_event_day(row) if row else None

    def get_action(self, action_id: UUID) -> Optional[EventAction]:
        row = self._fetchone(
            query=self._SQL_GET_ACTION,
            params=[action_id],
            context_msg="PostgresEventRepository: get_action failed",
            extra={"action_id": str(action_id)},
        )
        return _row_to_action(row) if row else None

    def get_action_by_code(self, code: str) -> Optional[EventAction]:
        row = self._fetchone(
            query=self._SQL_GET_ACTION_BY_CODE,
            params=[code],
            context_msg="PostgresEventRepository: get_action_by_code failed",
            extra={"action_code": code},
        )
        return _row_to_action(row) if row else None
