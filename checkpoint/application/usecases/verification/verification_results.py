"""
===============================================================================
VERIFICATION USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Verification Use Case Results

Business Goal:
    Proveer tipos consistentes de resultados y errores para el motor de
    verificación (canje, consultas, reversión).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar excepciones.
    - Facilita:
        * mapeo uniforme a HTTP (status codes y payloads)
        * testeo de flujos por resultado (sin mocks de HTTP)
        * métricas por outcome (el code es de baja cardinalidad)
    - `details` transporta datos estructurados (ej. payment_status) y
      `cause` la excepción original para logs (nunca se serializa).

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    verification_results models (module)

Responsibilities:
    - Definir VerificationErrorCode como conjunto cerrado de motivos.
    - Definir VerificationError como contrato mínimo de error.
    - Definir DTOs de resultados por caso de uso.

Collaborators:
    - domain.entities / domain.value_objects
    - interfaces/api/http/error_mapping.py (code -> HTTP)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List
from uuid import UUID

from ....domain.entities import ActionLog, ActionLogRevocation
from ....domain.value_objects import (
    DailyVerificationCount,
    VerificationRecord,
    VerificationStats,
)


class VerificationErrorCode(str, Enum):
    """
    Motivos de falla del motor de verificación (conjunto cerrado).

    Notas de diseño:
      - str + Enum facilita serialización directa y labels de métricas.
      - Cada código mapea a una única categoría de transporte.
    """

    INVALID_INPUT = "INVALID_INPUT"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"
    ACTION_INACTIVE = "ACTION_INACTIVE"
    VERIFIER_NOT_FOUND = "VERIFIER_NOT_FOUND"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_MISMATCH = "EVENT_MISMATCH"
    EVENT_NOT_STARTED = "EVENT_NOT_STARTED"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    VERIFICATION_NOT_FOUND = "VERIFICATION_NOT_FOUND"
    ALREADY_REVERTED = "ALREADY_REVERTED"


@dataclass(frozen=True)
class VerificationError:
    """
    Error de caso de uso del motor.

    Campos:
      - code: VerificationErrorCode (motivo estable)
      - message: mensaje humano (UI/logs)
      - details: datos estructurados opcionales (ej. {"payment_status": "pending"})
      - cause: excepción de infraestructura subyacente (solo PERSISTENCE_ERROR)
    """

    code: VerificationErrorCode
    message: str
    details: dict[str, Any] | None = None
    cause: Exception | None = field(default=None, compare=False, repr=False)


@dataclass
class VerifyActionResult:
    """
    Resultado de un canje.

    Contrato:
      - Éxito: success=True, log != None, error == None
      - Falla: success=False, error != None
    """

    success: bool = False
    message: str = ""
    redemption_id: UUID | None = None
    participant_name: str | None = None
    action_name: str | None = None
    event_title: str | None = None
    timestamp: datetime | None = None
    log: ActionLog | None = None
    error: VerificationError | None = None


@dataclass
class EligibilityResult:
    """
    Resultado del dry-run de elegibilidad.

    - eligible=False con error explica el primer gate que falló.
    """

    eligible: bool = False
    error: VerificationError | None = None


@dataclass
class ParticipantHistoryResult:
    records: List[VerificationRecord] = field(default_factory=list)
    error: VerificationError | None = None


@dataclass
class VerificationListResult:
    """
    Página de verificaciones de un evento.

    Campos:
      - records: página actual (posiblemente vacía)
      - total: total de registros que matchean los filtros
      - page/page_size: valores normalizados aplicados
      - total_pages: ceil(total / page_size)
    """

    records: List[VerificationRecord] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    total_pages: int = 0
    error: VerificationError | None = None


@dataclass
class VerificationStatsResult:
    stats: VerificationStats | None = None
    error: VerificationError | None = None


@dataclass
class DailyVerificationsResult:
    """Conteos por día (ascendente, incluye días en cero)."""

    days: List[DailyVerificationCount] = field(default_factory=list)
    error: VerificationError | None = None


@dataclass
class RevertVerificationResult:
    revocation: ActionLogRevocation | None = None
    error: VerificationError | None = None


# -----------------------------------------------------------------------------
# Helpers de construcción (evitan repetir code/message en cada use case)
# -----------------------------------------------------------------------------


def verification_error(
    code: VerificationErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
    cause: Exception | None = None,
) -> VerificationError:
    return VerificationError(code=code, message=message, details=details, cause=cause)


def persistence_error(exc: Exception) -> VerificationError:
    """Envuelve una falla de store (DatabaseError) sin filtrar detalles."""
    return VerificationError(
        code=VerificationErrorCode.PERSISTENCE_ERROR,
        message="Verification store is unavailable.",
        cause=exc,
    )
