"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .action_log import InMemoryActionLogRepository
from .event import InMemoryEventRepository
from .participant import InMemoryParticipantRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryParticipantRepository",
    "InMemoryEventRepository",
    "InMemoryUserRepository",
    "InMemoryActionLogRepository",
]
