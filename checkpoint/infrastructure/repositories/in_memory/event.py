"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/event.py
============================================================
Class: InMemoryEventRepository

Responsibilities:
  - Almacenar eventos, días y acciones en memoria (tests / local dev).
  - Replicar la unicidad de EventAction.code del esquema Postgres.

Collaborators:
  - domain.entities.Event, EventDay, EventAction
  - domain.repositories.EventRepository

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - add_action con código repetido => ValueError (emula el índice único).
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....domain.entities import Event, EventAction, EventDay
from ....domain.repositories import EventRepository


class InMemoryEventRepository(EventRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._events: Dict[UUID, Event] = {}
        self._days: Dict[UUID, EventDay] = {}
        self._actions: Dict[UUID, EventAction] = {}

    # =========================================================
    # Seed helpers
    # =========================================================
    def add_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.id] = event
        return event

    def add_event_day(self, event_day: EventDay) -> EventDay:
        with self._lock:
            self._days[event_day.id] = event_day
        return event_day

    def add_action(self, action: EventAction) -> EventAction:
        with self._lock:
            for existing in self._actions.values():
                if existing.code == action.code and existing.id != action.id:
                    raise ValueError(f"duplicate action code: {action.code}")
            self._actions[action.id] = action
        return action

    # =========================================================
    # EventRepository
    # =========================================================
    def get_event(self, event_id: UUID) -> Optional[Event]:
        with self._lock:
            return self._events.get(event_id)

    def get_event_day(self, event_day_id: UUID) -> Optional[EventDay]:
        with self._lock:
            return self._days.get(event_day_id)

    def get_action(self, action_id: UUID) -> Optional[EventAction]:
        with self._lock:
            return self._actions.get(action_id)

    def get_action_by_code(self, code: str) -> Optional[EventAction]:
        with self._lock:
            for action in self._actions.values():
                if action.code == code:
                    return action
        return None

    def clear(self) -> None:
        """R: Helper de testing."""
        with self._lock:
            self._events.clear()
            self._days.clear()
            self._actions.clear()
