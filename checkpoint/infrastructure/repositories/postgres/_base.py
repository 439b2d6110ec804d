"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/_base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Resolver el pool (inyectado o global) de forma lazy.
  - Ejecutar SELECT fetchone/fetchall con manejo consistente de errores.
  - Traducir cualquier error de driver/pool a DatabaseError + log estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool / InstrumentedConnectionPool
  - infrastructure.db.pool.get_pool
  - crosscutting.exceptions.DatabaseError
  - crosscutting.logger.logger

Constraints:
  - SQL parametrizado siempre (nunca interpolar input de usuario).
============================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import psycopg

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ...db.errors import DatabasePoolError

# Errores de infraestructura que se traducen a DatabaseError.
DB_FAILURES = (psycopg.Error, DatabasePoolError)


class PostgresRepositoryBase:
    """Helpers compartidos por los repositorios PostgreSQL."""

    def __init__(self, pool: Optional[Any] = None):
        # Pool inyectable para tests. En prod se obtiene por factory global.
        self._pool = pool

    def _get_pool(self):
        """Pool lazy-load."""
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except DB_FAILURES as exc:
            raise self._db_error(exc, context_msg, extra) from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except DB_FAILURES as exc:
            raise self._db_error(exc, context_msg, extra) from exc

    @staticmethod
    def _db_error(exc: Exception, context_msg: str, extra: dict) -> DatabaseError:
        logger.exception(context_msg, extra={**extra, "error": str(exc)})
        return DatabaseError(f"{context_msg}: {exc}", original_error=exc)
