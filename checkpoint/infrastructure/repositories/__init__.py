# infrastructure/repositories/__init__.py
"""
============================================================
TARJETA CRC — infrastructure/repositories/__init__.py
============================================================
Module: infrastructure.repositories (Public Export Surface)

Responsibilities:
  - Exponer una API pública y estable de repositorios de infraestructura.
  - Mantener un orden lógico (InMemory primero, luego Postgres).

Collaborators:
  - Repositorios concretos (Postgres*, InMemory*)
  - container.py (elige implementación según APP_ENV)

Policy:
  - Este archivo NO contiene lógica de negocio.
  - Solo re-exporta símbolos; no debe tener side effects.
============================================================
"""

# ------------------------------------------------------------
# In-memory implementations (tests / local dev)
# ------------------------------------------------------------
from .in_memory import (
    InMemoryActionLogRepository,
    InMemoryEventRepository,
    InMemoryParticipantRepository,
    InMemoryUserRepository,
)

# ------------------------------------------------------------
# PostgreSQL implementations (infra real)
# ------------------------------------------------------------
from .postgres import (
    PostgresActionLogRepository,
    PostgresEventRepository,
    PostgresParticipantRepository,
    PostgresUserRepository,
)

__all__ = [
    "InMemoryParticipantRepository",
    "InMemoryEventRepository",
    "InMemoryUserRepository",
    "InMemoryActionLogRepository",
    "PostgresParticipantRepository",
    "PostgresEventRepository",
    "PostgresUserRepository",
    "PostgresActionLogRepository",
]
