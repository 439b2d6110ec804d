"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Autenticación del personal (JWT emitido por el servicio de auth)

Responsabilidades:
    - Decodificar y validar JWT (firma, exp, claims mínimos sub/role).
    - Construir el Principal (user_id + role) del request.
    - Exponer dependencias FastAPI (require_principal, require_roles).
    - Extraer token desde Authorization: Bearer o cookie.

Colaboradores:
    - crosscutting.config.get_settings: secreto y nombre de cookie.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - checkpoint.context.set_actor: correlación de logs.
    - identity.users: UserRole.

Decisiones de diseño:
    - Este servicio NO emite sesiones: solo valida tokens. create_access_token
      existe para tests y tooling local (mismo formato que el emisor real).
    - El Principal solo autoriza la ruta; el motor vuelve a resolver el
      verificador contra UserRepository (activo / rol real en DB).
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from fastapi import Header, Request

from ..context import set_actor
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from .users import UserRole

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

DEFAULT_ACCESS_TOKEN_COOKIE: str = "access_token"
DEFAULT_ACCESS_TTL_MINUTES: int = 30

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"

STAFF_ROLES: tuple[UserRole, ...] = (
    UserRole.STAFF,
    UserRole.ORGANIZER,
    UserRole.ADMIN,
)
ORGANIZER_ROLES: tuple[UserRole, ...] = (UserRole.ORGANIZER, UserRole.ADMIN)


# ---------------------------------------------------------------------------
# Contratos
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Principal:
    """Identidad autenticada del request (claims del token)."""

    user_id: UUID
    role: UserRole
    email: str | None = None


# ---------------------------------------------------------------------------
# Tokens JWT (emitir / decodificar)
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: UUID,
    role: UserRole,
    *,
    email: str | None = None,
    secret: str | None = None,
    ttl_minutes: int = DEFAULT_ACCESS_TTL_MINUTES,
) -> str:
    """Crea un JWT de acceso con el formato que espera decode_access_token."""
    now = datetime.now(timezone.utc)
    payload: dict[str, object] = {
        CLAIM_SUB: str(user_id),
        CLAIM_ROLE: role.value,
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(minutes=ttl_minutes)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }
    if email:
        payload[CLAIM_EMAIL] = email

    return jwt.encode(
        payload, secret or get_settings().jwt_secret, algorithm=JWT_ALGORITHM
    )


def decode_access_token(token: str, *, secret: str | None = None) -> Principal:
    """Decodifica y valida un JWT de acceso.

    Errores:
        - 401 si expiró, firma inválida o faltan claims mínimos.
    """
    try:
        payload = jwt.decode(
            token,
            secret or get_settings().jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_ROLE, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Token inválido.") from exc

    token_type = payload.get(CLAIM_TYP)
    if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
        raise unauthorized("Tipo de token inválido.")

    try:
        user_id = UUID(str(payload[CLAIM_SUB]))
        role = UserRole(str(payload[CLAIM_ROLE]))
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    email = payload.get(CLAIM_EMAIL)
    return Principal(user_id=user_id, role=role, email=str(email) if email else None)


# ---------------------------------------------------------------------------
# Extracción de token (header/cookie)
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def extract_access_token(request: Request, authorization: str | None) -> str | None:
    """Resuelve token desde Authorization o cookie."""
    token = _extract_bearer_token(authorization)
    if token:
        return token

    cookie_name = (
        get_settings().jwt_cookie_name or ""
    ).strip() or DEFAULT_ACCESS_TOKEN_COOKIE
    return request.cookies.get(cookie_name)


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_principal() -> Callable:
    """Dependency FastAPI: requiere un token válido."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Principal:
        token = extract_access_token(request, authorization)
        if not token:
            raise unauthorized("Falta token Bearer.")

        principal = decode_access_token(token)
        request.state.principal = principal
        set_actor(str(principal.user_id))
        return principal

    return dependency


def require_roles(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: requiere alguno de los roles indicados."""
    allowed = {UserRole(role) for role in roles}

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Principal:
        principal = await require_principal()(request, authorization)
        if principal.role not in allowed:
            logger.info(
                "acceso denegado por rol",
                extra={"role": principal.role.value, "path": request.url.path},
            )
            raise forbidden("Rol insuficiente.")
        return principal

    return dependency
