"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/participant.py
============================================================
Class: PostgresParticipantRepository

Responsibilities:
  - Leer participantes (por id) y contar inscriptos por evento.
  - Mapear filas crudas -> entidad Participant (PaymentStatus estricto).

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - Tabla: participants(id, event_id, name, email, phone, payment_status,
           qr_path, created_at)

Constraints / Notes:
  - Retorna None cuando no existe (no exception por “not found”).
  - payment_status desconocido en DB => DatabaseError (drift de datos).
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import Participant, PaymentStatus
from ._base import PostgresRepositoryBase

_PARTICIPANT_COLUMNS = (
    "id, event_id, name, email, phone, payment_status, qr_path, created_at"
)


def _row_to_participant(row: tuple) -> Participant:
    try:
        status = PaymentStatus(row[5])
    except ValueError as exc:
        raise DatabaseError(f"Invalid payment status in database: {row[5]}") from exc

    return Participant(
        id=row[0],
        event_id=row[1],
        name=row[2],
        email=row[3],
        phone=row[4],
        payment_status=status,
        qr_path=row[6],
        created_at=row[7],
    )


class PostgresParticipantRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL (solo lectura) de participantes."""

    _SQL_GET = f"SELECT {_PARTICIPANT_COLUMNS} FROM participants WHERE id = %s"

    _SQL_COUNT_BY_EVENT = "SELECT COUNT(*) FROM participants WHERE event_id = %s"

    def get_participant(self, participant_id: UUID) -> Optional[Participant]:
        row = self._fetchone(
            query=self._SQL_GET,
            params=[participant_id],
            context_msg="PostgresParticipantRepository: get_participant failed",
            extra={"participant_id": str(participant_id)},
        )
        return _row_to_participant(row) if row else None

    def count_participants_by_event(self, event_id: UUID) -> int:
        row = self._fetchone(
            query=self._SQL_COUNT_BY_EVENT,
            params=[event_id],
            context_msg="PostgresParticipantRepository: count_participants_by_event failed",
            extra={"event_id": str(event_id)},
        )
        return int(row[0]) if row else 0
