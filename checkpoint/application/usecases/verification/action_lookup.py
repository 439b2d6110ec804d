"""
===============================================================================
ACTION REGISTRY LOOKUP (Code / Id Resolution)
===============================================================================

Name:
    Action Registry Lookup Helpers

Business Goal:
    Resolver una acción canjeable por su código (o id) y garantizar que esté
    activa antes de que cualquier otro gate la use.

Why (Context / Intención):
    - El scanner envía el código de la acción, no su id.
    - Una acción desactivada por el organizador no debe poder canjearse.

-------------------------------------------------------------------------------
CRC CARD (Functions-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    action_lookup helpers (module-level functions)

Responsibilities:
    - Buscar por código exacto (sin normalizar mayúsculas).
    - Retornar (EventAction | None, VerificationError | None) como contrato estable.

Collaborators:
    - EventRepository:
        get_action_by_code(code) / get_action(action_id)
    - Verification results:
        VerificationError, VerificationErrorCode

Notas:
    - DatabaseError NO se captura aquí: lo traduce el caso de uso.
===============================================================================
"""

from __future__ import annotations

from typing import Final, Tuple
from uuid import UUID

from ....domain.entities import EventAction
from ....domain.repositories import EventRepository
from .verification_results import (
    VerificationError,
    VerificationErrorCode,
    verification_error,
)

_MSG_ACTION_NOT_FOUND: Final[str] = "Action not found."
_MSG_ACTION_INACTIVE: Final[str] = "Action is not active."


def resolve_active_action(
    event_repository: EventRepository, code: str
) -> Tuple[EventAction | None, VerificationError | None]:
    """
    Resuelve una acción activa por código.

    Retorna:
      - (action, None) si existe y está activa
      - (None, ACTION_NOT_FOUND | ACTION_INACTIVE)
    """
    action = event_repository.get_action_by_code(code)
    return _ensure_active(action)


def resolve_active_action_by_id(
    event_repository: EventRepository, action_id: UUID
) -> Tuple[EventAction | None, VerificationError | None]:
    """Variante por id (usada por el dry-run de elegibilidad)."""
    action = event_repository.get_action(action_id)
    return _ensure_active(action)


def _ensure_active(
    action: EventAction | None,
) -> Tuple[EventAction | None, VerificationError | None]:
    if action is None:
        return None, verification_error(
            VerificationErrorCode.ACTION_NOT_FOUND, _MSG_ACTION_NOT_FOUND
        )
    if not action.is_active:
        return None, verification_error(
            VerificationErrorCode.ACTION_INACTIVE,
            _MSG_ACTION_INACTIVE,
            details={"action_code": action.code},
        )
    return action, None
