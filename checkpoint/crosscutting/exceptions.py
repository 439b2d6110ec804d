# checkpoint/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas de infraestructura (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  CheckpointError + subclases

Responsabilidades:
  - Estandarizar errores de colaboradores (DB) antes de cruzar al dominio
  - Generar error_id para rastreo

Colaboradores:
  - infrastructure/repositories/postgres/* (levantan DatabaseError)
  - application/usecases/verification/* (envuelven en PERSISTENCE_ERROR)
  - api/exception_handlers.py (fallback si algo escapa a los use cases)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class CheckpointError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      CheckpointError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message + causa original

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "CHECKPOINT_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(CheckpointError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"
