"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/action_log.py
============================================================
Class: InMemoryActionLogRepository

Responsibilities:
  - Almacenar ActionLog y revocaciones en memoria (tests / local dev).
  - Emular los índices únicos de Postgres:
      (participant_id, action_id) y (action_log_id) en revocaciones.
  - Producir los mismos read-models y agregados que el repo Postgres.

Collaborators:
  - InMemoryParticipantRepository / InMemoryEventRepository /
    InMemoryUserRepository (para resolver nombres, como los JOIN)
  - domain.repositories.ActionLogRepository

Constraints / Notes:
  - Thread-safe: check + insert ocurren bajo el mismo Lock, lo que da la
    misma garantía at-most-once que ON CONFLICT en Postgres.
  - Orden alineado con Postgres: verified_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from threading import Lock
from typing import Dict, List, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo

from ....domain.entities import ActionLog, ActionLogRevocation
from ....domain.repositories import ActionLogRepository
from ....domain.value_objects import (
    EventVerificationAggregates,
    VerificationFilters,
    VerificationRecord,
)
from .event import InMemoryEventRepository
from .participant import InMemoryParticipantRepository
from .user import InMemoryUserRepository


class InMemoryActionLogRepository(ActionLogRepository):
    def __init__(
        self,
        participants: InMemoryParticipantRepository,
        events: InMemoryEventRepository,
        users: InMemoryUserRepository,
    ) -> None:
        self._lock = Lock()
        self._participants = participants
        self._events = events
        self._users = users
        self._logs: Dict[UUID, ActionLog] = {}
        self._by_pair: Dict[Tuple[UUID, UUID], UUID] = {}
        self._revocations: Dict[UUID, ActionLogRevocation] = {}

    # =========================================================
    # Escritura (append-only)
    # =========================================================
    def create_action_log(self, log: ActionLog) -> bool:
        pair = (log.participant_id, log.action_id)
        with self._lock:
            if pair in self._by_pair:
                return False
            self._by_pair[pair] = log.id
            self._logs[log.id] = log
        return True

    def create_revocation(self, revocation: ActionLogRevocation) -> bool:
        with self._lock:
            if revocation.action_log_id in self._revocations:
                return False
            self._revocations[revocation.action_log_id] = revocation
        return True

    # =========================================================
    # Lectura
    # =========================================================
    def exists(self, participant_id: UUID, action_id: UUID) -> bool:
        with self._lock:
            return (participant_id, action_id) in self._by_pair

    def get_action_log(self, log_id: UUID) -> Optional[ActionLog]:
        with self._lock:
            return self._logs.get(log_id)

    def list_by_participant(self, participant_id: UUID) -> List[VerificationRecord]:
        logs = [log for log in self._snapshot() if log.participant_id == participant_id]
        return [self._to_record(log) for log in self._sorted(logs)]

    def list_by_event(
        self,
        event_id: UUID,
        filters: VerificationFilters,
        *,
        limit: int,
        offset: int,
    ) -> Tuple[List[VerificationRecord], int]:
        matching = [
            log
            for log in self._snapshot()
            if self._event_of(log) == event_id and _matches(log, filters)
        ]
        ordered = self._sorted(matching)
        page = ordered[offset : offset + limit]
        return [self._to_record(log) for log in page], len(ordered)

    def get_event_aggregates(
        self,
        event_id: UUID,
        *,
        day_start: datetime,
        day_end: datetime,
        tz_name: str,
    ) -> EventVerificationAggregates:
        live = self._live_logs(event_id)
        if not live:
            return EventVerificationAggregates()

        zone = ZoneInfo(tz_name)
        action_names = Counter(self._action_name(log.action_id) for log in live)
        verifier_emails = Counter(
            email
            for email in (self._verifier_email(log.verified_by) for log in live)
            if email is not None
        )

        return EventVerificationAggregates(
            total_verifications=len(live),
            unique_participants=len({log.participant_id for log in live}),
            most_verified_action=_top(action_names),
            top_verifier=_top(verifier_emails),
            last_verification=max(log.verified_at for log in live),
            today_verifications=sum(
                1 for log in live if day_start <= log.verified_at < day_end
            ),
            distinct_days=len({log.verified_at.astimezone(zone).date() for log in live}),
        )

    def count_daily(
        self, event_id: UUID, *, since: date, tz_name: str
    ) -> List[Tuple[date, int]]:
        zone = ZoneInfo(tz_name)
        counts = Counter(
            day
            for day in (
                log.verified_at.astimezone(zone).date()
                for log in self._live_logs(event_id)
            )
            if day >= since
        )
        return sorted(counts.items())

    def ping(self) -> bool:
        return True

    def clear(self) -> None:
        """R: Helper de testing."""
        with self._lock:
            self._logs.clear()
            self._by_pair.clear()
            self._revocations.clear()

    # =========================================================
    # Helpers internos
    # =========================================================
    def _snapshot(self) -> List[ActionLog]:
        with self._lock:
            return list(self._logs.values())

    def _is_revoked(self, log_id: UUID) -> bool:
        with self._lock:
            return log_id in self._revocations

    def _live_logs(self, event_id: UUID) -> List[ActionLog]:
        return [
            log
            for log in self._snapshot()
            if self._event_of(log) == event_id and not self._is_revoked(log.id)
        ]

    def _event_of(self, log: ActionLog) -> UUID | None:
        action = self._events.get_action(log.action_id)
        return action.event_id if action else None

    def _action_name(self, action_id: UUID) -> str:
        action = self._events.get_action(action_id)
        return action.name if action else ""

    def _verifier_email(self, user_id: UUID) -> str | None:
        user = self._users.get_user_by_id(user_id)
        return user.email if user else None

    @staticmethod
    def _sorted(logs: List[ActionLog]) -> List[ActionLog]:
        # verified_at DESC, id DESC
        return sorted(logs, key=lambda log: (log.verified_at, str(log.id)), reverse=True)

    def _to_record(self, log: ActionLog) -> VerificationRecord:
        participant = self._participants.get_participant(log.participant_id)
        action = self._events.get_action(log.action_id)
        event = self._events.get_event(action.event_id) if action else None
        with self._lock:
            revocation = self._revocations.get(log.id)

        return VerificationRecord(
            id=log.id,
            participant_id=log.participant_id,
            participant_name=participant.name if participant else "",
            action_id=log.action_id,
            action_name=action.name if action else "",
            action_code=action.code if action else "",
            event_id=action.event_id if action else log.action_id,
            event_title=event.title if event else "",
            verified_by=log.verified_by,
            verifier_email=self._verifier_email(log.verified_by),
            verified_at=log.verified_at,
            reverted_at=revocation.reverted_at if revocation else None,
        )


def _matches(log: ActionLog, filters: VerificationFilters) -> bool:
    if filters.date_from is not None and log.verified_at < filters.date_from:
        return False
    if filters.date_to is not None and log.verified_at > filters.date_to:
        return False
    if filters.action_id is not None and log.action_id != filters.action_id:
        return False
    if filters.verifier_id is not None and log.verified_by != filters.verifier_id:
        return False
    return True


def _top(counter: Counter) -> str | None:
    """Mayor conteo; empate => orden alfabético (igual que ORDER BY total DESC, name ASC)."""
    if not counter:
        return None
    return min(counter.items(), key=lambda item: (-item[1], item[0]))[0]
