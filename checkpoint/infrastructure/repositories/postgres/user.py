"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios del personal por id (verificador / admin).
  - Mapear filas crudas -> entidad `User` y validar `UserRole`.

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - identity.users.User / UserRole
  - Tabla: users(id, email, role, is_active, created_at)

Constraints / Notes:
  - Repositorio puro: NO decide si un usuario inactivo puede verificar.
  - Rol desconocido en DB => DatabaseError (drift de esquema/datos).
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import User, UserRole
from ._base import PostgresRepositoryBase

# Lista explícita de columnas: contrato estable con migraciones.
_USER_COLUMNS = "id, email, role, is_active, created_at"


def _row_to_user(row: tuple) -> User:
    try:
        role = UserRole(row[2])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[2]}") from exc

    return User(
        id=row[0],
        email=row[1],
        role=role,
        is_active=bool(row[3]),
        created_at=row[4],
    )


class PostgresUserRepository(PostgresRepositoryBase):
    _SQL_GET_BY_ID = f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s"

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=self._SQL_GET_BY_ID,
            params=[user_id],
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None
