"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Colaboradores:
    - domain.entities: Entidades (Participant, Event, EventAction, ActionLog, ...)
    - domain.value_objects: Filtros y read-models de verificación
    - domain.repositories: Puertos de persistencia
    - domain.credentials: Resolución de identidad desde credenciales

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .credentials import InvalidCredentialError, resolve_participant_id
from .entities import (
    ActionLog,
    ActionLogRevocation,
    Event,
    EventAction,
    EventDay,
    Participant,
    PaymentStatus,
)
from .repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
    UserRepository,
)
from .value_objects import (
    DailyVerificationCount,
    EventVerificationAggregates,
    VerificationFilters,
    VerificationRecord,
    VerificationStats,
)

__all__ = [
    # Entities
    "Participant",
    "PaymentStatus",
    "Event",
    "EventDay",
    "EventAction",
    "ActionLog",
    "ActionLogRevocation",
    # Value objects / read models
    "VerificationFilters",
    "VerificationRecord",
    "VerificationStats",
    "EventVerificationAggregates",
    "DailyVerificationCount",
    # Repository Interfaces (Ports)
    "ParticipantRepository",
    "EventRepository",
    "UserRepository",
    "ActionLogRepository",
    # Credentials
    "resolve_participant_id",
    "InvalidCredentialError",
]
