"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the verification engine (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fake repositories).

Collaborators
- domain.entities: Participant, Event, EventDay, EventAction, ActionLog, ActionLogRevocation
- domain.value_objects: VerificationFilters, VerificationRecord, aggregates
- identity.users: User
- infrastructure.repositories: postgres/* and in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- Implementations raise DatabaseError on store failures; "not found" is None.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- ActionLogRepository.create_action_log is the authoritative duplicate guard:
  it must be atomic with respect to UNIQUE (participant_id, action_id).
"""

from datetime import date, datetime
from typing import List, Optional, Protocol, Tuple
from uuid import UUID

from ..identity.users import User
from .entities import (
    ActionLog,
    ActionLogRevocation,
    Event,
    EventAction,
    EventDay,
    Participant,
)
from .value_objects import (
    EventVerificationAggregates,
    VerificationFilters,
    VerificationRecord,
)


class ParticipantRepository(Protocol):
    """R: Read access to participants (registration lives elsewhere)."""

    def get_participant(self, participant_id: UUID) -> Optional[Participant]:
        """R: Fetch participant by id (None if missing)."""
        ...

    def count_participants_by_event(self, event_id: UUID) -> int:
        """R: Number of registered participants for an event."""
        ...


class EventRepository(Protocol):
    """
    R: Read access to events, event days and the action registry.

    Action codes are unique across the whole registry.
    """

    def get_event(self, event_id: UUID) -> Optional[Event]:
        ...

    def get_event_day(self, event_day_id: UUID) -> Optional[EventDay]:
        ...

    def get_action(self, action_id: UUID) -> Optional[EventAction]:
        ...

    def get_action_by_code(self, code: str) -> Optional[EventAction]:
        """R: Exact match on EventAction.code (None if missing)."""
        ...


class UserRepository(Protocol):
    """R: Read access to staff users (verifiers and admins)."""

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        ...


class ActionLogRepository(Protocol):
    """
    R: Append-only persistence for redemptions and their revocations.

    Implementations must provide:
      - Atomic insert guarded by UNIQUE (participant_id, action_id)
      - Joined read-models for history/listing
      - Aggregates for stats (revoked logs excluded)
    """

    def exists(self, participant_id: UUID, action_id: UUID) -> bool:
        """R: True if a log already exists for the pair (revoked or not)."""
        ...

    def create_action_log(self, log: ActionLog) -> bool:
        """
        R: Insert a log atomically.

        Returns:
            True if inserted, False if the pair was already recorded.
        """
        ...

    def get_action_log(self, log_id: UUID) -> Optional[ActionLog]:
        ...

    def list_by_participant(self, participant_id: UUID) -> List[VerificationRecord]:
        """R: Records for a participant ordered by verified_at DESC."""
        ...

    def list_by_event(
        self,
        event_id: UUID,
        filters: VerificationFilters,
        *,
        limit: int,
        offset: int,
    ) -> Tuple[List[VerificationRecord], int]:
        """
        R: Page of records for an event plus the total matching the filters.

        Ordering: verified_at DESC, id DESC.
        """
        ...

    def get_event_aggregates(
        self,
        event_id: UUID,
        *,
        day_start: datetime,
        day_end: datetime,
        tz_name: str,
    ) -> EventVerificationAggregates:
        """
        R: Raw aggregates over non-revoked logs of an event.

        Args:
            day_start/day_end: [start, end) window counted as "today".
            tz_name: IANA zone used to bucket distinct verification days.
        """
        ...

    def count_daily(
        self, event_id: UUID, *, since: date, tz_name: str
    ) -> List[Tuple[date, int]]:
        """R: (day, count) for non-revoked logs on or after `since` (only non-zero days)."""
        ...

    def create_revocation(self, revocation: ActionLogRevocation) -> bool:
        """
        R: Append a revocation.

        Returns:
            True if inserted, False if the log was already revoked.
        """
        ...

    def ping(self) -> bool:
        """R: Check repository connectivity/availability."""
        ...
