"""
===============================================================================
TARJETA CRC — error_mapping.py (VerificationError -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir VerificationErrorCode a la categoría de transporte HTTP.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el motor libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message [+ details]).
  - La API traduce a RFC7807 (crosscutting.error_responses).
  - El kind del motor viaja en errors[0].kind junto con sus details.
  - PERSISTENCE_ERROR nunca expone la causa (solo se loguea en el use case).

Colaboradores:
  - application.usecases.verification (VerificationError, VerificationErrorCode)
  - crosscutting.error_responses (validation_error, conflict, etc.)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Dict, NoReturn

from ....application.usecases.verification import (
    VerificationError,
    VerificationErrorCode,
)
from ....crosscutting.error_responses import (
    AppHTTPException,
    conflict,
    database_error,
    forbidden,
    internal_error,
    not_found,
    not_implemented,
    unauthorized,
    validation_error,
)

_Factory = Callable[..., AppHTTPException]

# Código del motor -> factory de transporte.
_CATEGORY_BY_CODE: Dict[VerificationErrorCode, _Factory] = {
    VerificationErrorCode.INVALID_INPUT: validation_error,
    VerificationErrorCode.INVALID_CREDENTIAL: validation_error,
    VerificationErrorCode.PARTICIPANT_NOT_FOUND: not_found,
    VerificationErrorCode.ACTION_NOT_FOUND: not_found,
    VerificationErrorCode.EVENT_NOT_FOUND: not_found,
    VerificationErrorCode.VERIFICATION_NOT_FOUND: not_found,
    VerificationErrorCode.VERIFIER_NOT_FOUND: unauthorized,
    VerificationErrorCode.PAYMENT_REQUIRED: conflict,
    VerificationErrorCode.ALREADY_VERIFIED: conflict,
    VerificationErrorCode.ACTION_INACTIVE: conflict,
    VerificationErrorCode.ALREADY_REVERTED: conflict,
    VerificationErrorCode.EVENT_MISMATCH: forbidden,
    VerificationErrorCode.EVENT_NOT_STARTED: forbidden,
    VerificationErrorCode.PERMISSION_DENIED: forbidden,
    VerificationErrorCode.NOT_IMPLEMENTED: not_implemented,
    VerificationErrorCode.PERSISTENCE_ERROR: database_error,
}


def error_payload(error: VerificationError) -> list[dict[str, Any]]:
    """errors[] del problem+json: kind del motor + details estructurados."""
    return [{"kind": error.code.value, **(error.details or {})}]


def to_http_exception(error: VerificationError) -> AppHTTPException:
    """
    Traduce VerificationError -> AppHTTPException.

    Fallback: un código sin categoría se trata como 500 (no debería ocurrir).
    """
    factory = _CATEGORY_BY_CODE.get(error.code)
    if factory is None:
        return internal_error(error.message)
    return factory(error.message, error_payload(error))


def raise_verification_error(error: VerificationError) -> NoReturn:
    raise to_http_exception(error)
