"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario (verificadores y administradores)

Responsabilidades:
    - Definir el enum de roles (admin / organizer / staff).
    - Definir el dataclass User que el motor resuelve como verificador.
    - Mantener el contrato de datos de identidad centralizado y estable.

Colaboradores:
    - identity/auth_users.py: valida el rol del token contra UserRole.
    - infrastructure/repositories/postgres/user.py: mapea filas -> User.
    - application/usecases/verification: resuelven verifier/admin por id.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - La emisión de credenciales (login) vive fuera de este servicio.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles de personal del evento."""

    ADMIN = "admin"
    ORGANIZER = "organizer"
    STAFF = "staff"


@dataclass(frozen=True, slots=True)
class User:
    """Usuario del personal (puede verificar canjes)."""

    id: UUID
    email: str
    role: UserRole
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
