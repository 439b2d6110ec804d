"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/participant.py
============================================================
Class: InMemoryParticipantRepository

Responsibilities:
  - Almacenar participantes en memoria (tests / local dev).
  - Implementar el contrato ParticipantRepository.
  - Exponer helpers de seed (add_participant) y clear() para tests.

Collaborators:
  - domain.entities.Participant
  - domain.repositories.ParticipantRepository

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....domain.entities import Participant
from ....domain.repositories import ParticipantRepository


class InMemoryParticipantRepository(ParticipantRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._participants: Dict[UUID, Participant] = {}

    def add_participant(self, participant: Participant) -> Participant:
        with self._lock:
            self._participants[participant.id] = participant
        return participant

    def get_participant(self, participant_id: UUID) -> Optional[Participant]:
        with self._lock:
            return self._participants.get(participant_id)

    def count_participants_by_event(self, event_id: UUID) -> int:
        with self._lock:
            return sum(
                1 for p in self._participants.values() if p.event_id == event_id
            )

    def clear(self) -> None:
        """R: Helper de testing."""
        with self._lock:
            self._participants.clear()
