"""
===============================================================================
TARJETA CRC — domain/credentials.py
===============================================================================

Módulo:
    Resolución de identidad desde el payload de una credencial escaneada

Responsabilidades:
    - Convertir el texto crudo de un QR en el UUID del participante.
    - Aceptar la codificación estructurada (ruta de archivo "<uuid>.<ext>")
      y, como fallback, un UUID plano.
    - Rechazar todo lo demás con InvalidCredentialError.

Colaboradores:
    - application/usecases/verification/verify_participant_action.py

Reglas:
    - Función pura: sin I/O, sin estado.
    - El payload NUNCA se loguea (puede ser adivinable); solo el UUID resuelto.
===============================================================================
"""

from __future__ import annotations

from pathlib import PureWindowsPath
from uuid import UUID


class InvalidCredentialError(ValueError):
    """El payload no codifica ningún identificador de participante."""


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except (ValueError, TypeError):
        return None


def _uuid_from_file_path(raw: str) -> UUID | None:
    """
    "uploads/qrcodes/<uuid>.png" -> UUID.

    Requiere extensión: sin sufijo no se considera codificación estructurada.
    PureWindowsPath separa tanto por "/" como por "\\".
    """
    name = PureWindowsPath(raw).name
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        return None
    return _parse_uuid(stem)


def resolve_participant_id(raw: str) -> UUID:
    """
    Devuelve el UUID del participante codificado en `raw`.

    Raises:
        InvalidCredentialError: payload vacío o sin identificador reconocible.
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidCredentialError("credential is empty")

    participant_id = _uuid_from_file_path(value)
    if participant_id is not None:
        return participant_id

    participant_id = _parse_uuid(value)
    if participant_id is not None:
        return participant_id

    raise InvalidCredentialError("credential does not encode a participant id")
