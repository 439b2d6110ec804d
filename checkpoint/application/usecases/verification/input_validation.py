"""
Input validation helpers for verification use cases.

Los casos de uso aceptan ids como `UUID | str` (el adaptador HTTP puede pasar
strings crudos). Estas funciones devuelven (valor, error) en vez de lanzar.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Final, Tuple
from uuid import UUID

from .verification_results import (
    VerificationError,
    VerificationErrorCode,
    verification_error,
)

_MSG_REQUIRED: Final[str] = "{field} is required."
_MSG_INVALID_UUID: Final[str] = "{field} must be a valid UUID."


def require_text(
    value: str | None, field: str
) -> Tuple[str | None, VerificationError | None]:
    text = (value or "").strip()
    if not text:
        return None, _invalid(_MSG_REQUIRED.format(field=field), field)
    return text, None


def require_uuid(
    value: UUID | str | None, field: str
) -> Tuple[UUID | None, VerificationError | None]:
    if isinstance(value, UUID):
        return value, None

    text = (value or "").strip()
    if not text:
        return None, _invalid(_MSG_REQUIRED.format(field=field), field)
    try:
        return UUID(text), None
    except ValueError:
        return None, _invalid(_MSG_INVALID_UUID.format(field=field), field)


def as_utc(value: datetime | None) -> datetime | None:
    """Fechas sin zona se interpretan en UTC (verified_at es timestamptz)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _invalid(message: str, field: str) -> VerificationError:
    return verification_error(
        VerificationErrorCode.INVALID_INPUT, message, details={"field": field}
    )
