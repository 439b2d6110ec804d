"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/action_log.py
============================================================
Class: PostgresActionLogRepository

Responsibilities:
  - Insertar ActionLog de forma atómica respetando
    uq_action_logs_participant_action (ON CONFLICT DO NOTHING).
  - Insertar revocaciones compensatorias (uq_action_log_revocations_action_log_id).
  - Leer historial/listados como VerificationRecord (JOIN con nombres).
  - Calcular agregados por evento excluyendo logs revertidos.

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - Tablas: action_logs, action_log_revocations, participants,
            event_actions, events, users

Constraints / Notes:
  - Append-only: no hay UPDATE ni DELETE sobre action_logs.
  - Orden determinístico: verified_at DESC, id DESC.
  - La unicidad la garantiza el índice, no un SELECT previo: dos scanners
    concurrentes producen exactamente un insert y un conflicto.
============================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID

from ....domain.entities import ActionLog, ActionLogRevocation
from ....domain.value_objects import (
    EventVerificationAggregates,
    VerificationFilters,
    VerificationRecord,
)
from ._base import DB_FAILURES, PostgresRepositoryBase

_LOG_COLUMNS = "id, participant_id, action_id, verified_by, verified_at, created_at"

# Vista de lectura: log + nombres + estado de revocación.
_RECORD_SELECT = """
    SELECT l.id, l.participant_id, p.name, l.action_id, a.name, a.code,
           a.event_id, e.title, l.verified_by, u.email, l.verified_at,
           r.reverted_at
    FROM action_logs l
    JOIN participants p ON p.id = l.participant_id
    JOIN event_actions a ON a.id = l.action_id
    JOIN events e ON e.id = a.event_id
    LEFT JOIN users u ON u.id = l.verified_by
    LEFT JOIN action_log_revocations r ON r.action_log_id = l.id
"""

# Logs vigentes (no revertidos) de un evento. Primer parámetro: event_id.
_LIVE_LOGS_CTE = """
    WITH live AS (
        SELECT l.id, l.participant_id, l.action_id, l.verified_by, l.verified_at
        FROM action_logs l
        JOIN event_actions a ON a.id = l.action_id
        LEFT JOIN action_log_revocations r ON r.action_log_id = l.id
        WHERE a.event_id = %s AND r.id IS NULL
    )
"""


def _row_to_log(row: tuple) -> ActionLog:
    return ActionLog(
        id=row[0],
        participant_id=row[1],
        action_id=row[2],
        verified_by=row[3],
        verified_at=row[4],
        created_at=row[5],
    )


def _row_to_record(row: tuple) -> VerificationRecord:
    return VerificationRecord(
        id=row[0],
        participant_id=row[1],
        participant_name=row[2],
        action_id=row[3],
        action_name=row[4],
        action_code=row[5],
        event_id=row[6],
        event_title=row[7],
        verified_by=row[8],
        verifier_email=row[9],
        verified_at=row[10],
        reverted_at=row[11],
    )


def _event_filters(
    event_id: UUID, filters: VerificationFilters
) -> Tuple[str, list[object]]:
    """WHERE dinámico (solo columnas fijas, valores parametrizados)."""
    clauses = ["a.event_id = %s"]
    params: list[object] = [event_id]

    if filters.date_from is not None:
        clauses.append("l.verified_at >= %s")
        params.append(filters.date_from)
    if filters.date_to is not None:
        clauses.append("l.verified_at <= %s")
        params.append(filters.date_to)
    if filters.action_id is not None:
        clauses.append("l.action_id = %s")
        params.append(filters.action_id)
    if filters.verifier_id is not None:
        clauses.append("l.verified_by = %s")
        params.append(filters.verifier_id)

    return " AND ".join(clauses), params


class PostgresActionLogRepository(PostgresRepositoryBase):
    """
    Repositorio PostgreSQL de canjes y revocaciones.

    Modelo mental:
    - action_logs es append-only; cada fila es un canje.
    - action_log_revocations anula (lógicamente) un canje sin borrarlo.
    """

    # =========================================================
    # SQL Constantes (Privadas)
    # =========================================================
    _SQL_EXISTS = """
        SELECT 1 FROM action_logs
        WHERE participant_id = %s AND action_id = %s
        LIMIT 1
    """

    _SQL_INSERT_LOG = f"""
        INSERT INTO action_logs ({_LOG_COLUMNS})
        VALUES (%s, %s, %s, %s, %s, %s)
        ON CONFLICT (participant_id, action_id) DO NOTHING
        RETURNING id
    """

    _SQL_GET_LOG = f"SELECT {_LOG_COLUMNS} FROM action_logs WHERE id = %s"

    _SQL_LIST_BY_PARTICIPANT = f"""
        {_RECORD_SELECT}
        WHERE l.participant_id = %s
        ORDER BY l.verified_at DESC, l.id DESC
    """

    _SQL_INSERT_REVOCATION = """
        INSERT INTO action_log_revocations
            (id, action_log_id, reverted_by, reason, reverted_at)
        VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (action_log_id) DO NOTHING
        RETURNING id
    """

    _SQL_AGGREGATES = f"""
        {_LIVE_LOGS_CTE}
        SELECT COUNT(*),
               COUNT(DISTINCT participant_id),
               MAX(verified_at),
               COUNT(*) FILTER (WHERE verified_at >= %s AND verified_at < %s),
               COUNT(DISTINCT (verified_at AT TIME ZONE %s)::date)
        FROM live
    """

    _SQL_TOP_ACTION = f"""
        {_LIVE_LOGS_CTE}
        SELECT a.name, COUNT(*) AS total
        FROM live
        JOIN event_actions a ON a.id = live.action_id
        GROUP BY a.id, a.name
        ORDER BY total DESC, a.name ASC
        LIMIT 1
    """

    _SQL_TOP_VERIFIER = f"""
        {_LIVE_LOGS_CTE}
        SELECT u.email, COUNT(*) AS total
        FROM live
        JOIN users u ON u.id = live.verified_by
        GROUP BY u.id, u.email
        ORDER BY total DESC, u.email ASC
        LIMIT 1
    """

    _SQL_COUNT_DAILY = f"""
        {_LIVE_LOGS_CTE}
        SELECT (verified_at AT TIME ZONE %s)::date AS day, COUNT(*)
        FROM live
        WHERE (verified_at AT TIME ZONE %s)::date >= %s
        GROUP BY day
        ORDER BY day ASC
    """

    # =========================================================
    # Escritura (append-only)
    # =========================================================
    def create_action_log(self, log: ActionLog) -> bool:
        """
        Inserta el log dentro de una transacción.

        RETURNING vacío => conflicto en (participant_id, action_id) => False.
        """
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    row = conn.execute(
                        self._SQL_INSERT_LOG,
                        (
                            log.id,
                            log.participant_id,
                            log.action_id,
                            log.verified_by,
                            log.verified_at,
                            log.created_at or log.verified_at,
                        ),
                    ).fetchone()
        except DB_FAILURES as exc:
            raise self._db_error(
                exc,
                "PostgresActionLogRepository: create_action_log failed",
                {
                    "participant_id": str(log.participant_id),
                    "action_id": str(log.action_id),
                },
            ) from exc
        return row is not None

    def create_revocation(self, revocation: ActionLogRevocation) -> bool:
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    row = conn.execute(
                        self._SQL_INSERT_REVOCATION,
                        (
                            revocation.id,
                            revocation.action_log_id,
                            revocation.reverted_by,
                            revocation.reason,
                            revocation.reverted_at,
                        ),
                    ).fetchone()
        except DB_FAILURES as exc:
            raise self._db_error(
                exc,
                "PostgresActionLogRepository: create_revocation failed",
                {"action_log_id": str(revocation.action_log_id)},
            ) from exc
        return row is not None

    # =========================================================
    # Lectura
    # =========================================================
    def exists(self, participant_id: UUID, action_id: UUID) -> bool:
        row = self._fetchone(
            query=self._SQL_EXISTS,
            params=[participant_id, action_id],
            context_msg="PostgresActionLogRepository: exists failed",
            extra={"participant_id": str(participant_id), "action_id": str(action_id)},
        )
        return row is not None

    def get_action_log(self, log_id: UUID) -> Optional[ActionLog]:
        row = self._fetchone(
            query=self._SQL_GET_LOG,
            params=[log_id],
            context_msg="PostgresActionLogRepository: get_action_log failed",
            extra={"action_log_id": str(log_id)},
        )
        return _row_to_log(row) if row else None

    def list_by_participant(self, participant_id: UUID) -> List[VerificationRecord]:
        rows = self._fetchall(
            query=self._SQL_LIST_BY_PARTICIPANT,
            params=[participant_id],
            context_msg="PostgresActionLogRepository: list_by_participant failed",
            extra={"participant_id": str(participant_id)},
        )
        return [_row_to_record(row) for row in rows]

    def list_by_event(
        self,
        event_id: UUID,
        filters: VerificationFilters,
        *,
        limit: int,
        offset: int,
    ) -> Tuple[List[VerificationRecord], int]:
        where, params = _event_filters(event_id, filters)
        count_sql = f"""
            SELECT COUNT(*)
            FROM action_logs l
            JOIN event_actions a ON a.id = l.action_id
            WHERE {where}
        """
        page_sql = f"""
            {_RECORD_SELECT}
            WHERE {where}
            ORDER BY l.verified_at DESC, l.id DESC
            LIMIT %s OFFSET %s
        """
        extra = {"event_id": str(event_id), "limit": limit, "offset": offset}

        try:
            with self._get_pool().connection() as conn:
                total_row = conn.execute(count_sql, tuple(params)).fetchone()
                rows = conn.execute(page_sql, (*params, limit, offset)).fetchall()
        except DB_FAILURES as exc:
            raise self._db_error(
                exc, "PostgresActionLogRepository: list_by_event failed", extra
            ) from exc

        total = int(total_row[0]) if total_row else 0
        return [_row_to_record(row) for row in rows], total

    def get_event_aggregates(
        self,
        event_id: UUID,
        *,
        day_start: datetime,
        day_end: datetime,
        tz_name: str,
    ) -> EventVerificationAggregates:
        extra = {"event_id": str(event_id)}
        try:
            with self._get_pool().connection() as conn:
                totals = conn.execute(
                    self._SQL_AGGREGATES, (event_id, day_start, day_end, tz_name)
                ).fetchone()
                top_action = conn.execute(self._SQL_TOP_ACTION, (event_id,)).fetchone()
                top_verifier = conn.execute(
                    self._SQL_TOP_VERIFIER, (event_id,)
                ).fetchone()
        except DB_FAILURES as exc:
            raise self._db_error(
                exc, "PostgresActionLogRepository: get_event_aggregates failed", extra
            ) from exc

        total, unique, last, today, distinct_days = totals or (0, 0, None, 0, 0)
        return EventVerificationAggregates(
            total_verifications=int(total or 0),
            unique_participants=int(unique or 0),
            most_verified_action=top_action[0] if top_action else None,
            top_verifier=top_verifier[0] if top_verifier else None,
            last_verification=last,
            today_verifications=int(today or 0),
            distinct_days=int(distinct_days or 0),
        )

    def ping(self) -> bool:
        """Chequeo trivial de conectividad (usado por /healthz)."""
        self._fetchone(
            query="SELECT 1",
            params=[],
            context_msg="PostgresActionLogRepository: ping failed",
            extra={},
        )
        return True

    def count_daily(
        self, event_id: UUID, *, since: date, tz_name: str
    ) -> List[Tuple[date, int]]:
        rows = self._fetchall(
            query=self._SQL_COUNT_DAILY,
            params=[event_id, tz_name, tz_name, since],
            context_msg="PostgresActionLogRepository: count_daily failed",
            extra={"event_id": str(event_id), "since": since.isoformat()},
        )
        return [(row[0], int(row[1])) for row in rows]
