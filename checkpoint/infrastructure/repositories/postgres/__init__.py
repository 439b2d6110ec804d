"""
PostgreSQL Repository Implementations.

Raw parametrized SQL over psycopg 3 + psycopg_pool.
"""

from .action_log import PostgresActionLogRepository
from .event import PostgresEventRepository
from .participant import PostgresParticipantRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresParticipantRepository",
    "PostgresEventRepository",
    "PostgresUserRepository",
    "PostgresActionLogRepository",
]
