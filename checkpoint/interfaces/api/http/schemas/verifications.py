"""
===============================================================================
TARJETA CRC — schemas/verifications.py
===============================================================================

Módulo:
    Schemas HTTP para verificación de credenciales y reportes

Responsabilidades:
    - DTOs request/response para canje, elegibilidad, historial, listado,
      stats, conteos diarios y reversión.
    - Validar tamaños de campos de entrada (credential, action_code, reason).
    - Convertir read-models del dominio a DTOs (from_record / from_stats).

Colaboradores:
    - domain.value_objects (VerificationRecord, VerificationStats, ...)
    - crosscutting.pagination.PageMeta
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .....crosscutting.pagination import PageMeta
from .....domain.entities import ActionLogRevocation
from .....domain.value_objects import (
    DailyVerificationCount,
    VerificationRecord,
    VerificationStats,
)

MAX_CREDENTIAL_CHARS = 512
MAX_ACTION_CODE_CHARS = 100
MAX_REASON_CHARS = 500


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class VerifyReq(BaseModel):
    """Request de canje: contenido del QR + código de la acción."""

    qr_code_data: Annotated[
        str, Field(..., min_length=1, max_length=MAX_CREDENTIAL_CHARS)
    ]
    action_code: Annotated[
        str, Field(..., min_length=1, max_length=MAX_ACTION_CODE_CHARS)
    ]

    @field_validator("action_code")
    @classmethod
    def strip_action_code(cls, v: str) -> str:
        return v.strip()


class RevertReq(BaseModel):
    reason: str | None = Field(default=None, max_length=MAX_REASON_CHARS)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class VerifyRes(BaseModel):
    """Response de canje exitoso."""

    success: bool
    message: str
    redemption_id: UUID
    participant_name: str
    action_name: str
    event_title: str
    timestamp: datetime


class EligibilityRes(BaseModel):
    """Dry-run de elegibilidad (los gates fallidos viajan como RFC7807)."""

    eligible: bool


class VerificationRecordRes(BaseModel):
    id: UUID
    participant_id: UUID
    participant_name: str
    action_id: UUID
    action_name: str
    action_code: str
    event_id: UUID
    event_title: str
    verified_by: UUID
    verifier_email: str | None = None
    verified_at: datetime
    reverted: bool = False
    reverted_at: datetime | None = None

    @classmethod
    def from_record(cls, record: VerificationRecord) -> "VerificationRecordRes":
        return cls(
            id=record.id,
            participant_id=record.participant_id,
            participant_name=record.participant_name,
            action_id=record.action_id,
            action_name=record.action_name,
            action_code=record.action_code,
            event_id=record.event_id,
            event_title=record.event_title,
            verified_by=record.verified_by,
            verifier_email=record.verifier_email,
            verified_at=record.verified_at,
            reverted=record.is_reverted,
            reverted_at=record.reverted_at,
        )


class ParticipantHistoryRes(BaseModel):
    verifications: list[VerificationRecordRes]


class VerificationListRes(BaseModel):
    """Página de verificaciones de un evento."""

    verifications: list[VerificationRecordRes]
    meta: PageMeta


class VerificationStatsRes(BaseModel):
    event_id: UUID
    total_verifications: int
    unique_participants: int
    total_participants: int
    verification_rate: float
    most_verified_action: str | None = None
    top_verifier: str | None = None
    last_verification: datetime | None = None
    today_verifications: int
    average_daily_verifications: float

    @classmethod
    def from_stats(cls, stats: VerificationStats) -> "VerificationStatsRes":
        return cls(
            event_id=stats.event_id,
            total_verifications=stats.total_verifications,
            unique_participants=stats.unique_participants,
            total_participants=stats.total_participants,
            verification_rate=stats.verification_rate,
            most_verified_action=stats.most_verified_action,
            top_verifier=stats.top_verifier,
            last_verification=stats.last_verification,
            today_verifications=stats.today_verifications,
            average_daily_verifications=stats.average_daily_verifications,
        )


class DailyCountRes(BaseModel):
    day: date
    count: int

    @classmethod
    def from_count(cls, item: DailyVerificationCount) -> "DailyCountRes":
        return cls(day=item.day, count=item.count)


class DailyVerificationsRes(BaseModel):
    days: list[DailyCountRes]


class RevertRes(BaseModel):
    """Revocación registrada (el log original se conserva)."""

    verification_id: UUID
    revocation_id: UUID
    reverted_by: UUID
    reverted_at: datetime
    reason: str | None = None

    @classmethod
    def from_revocation(cls, revocation: ActionLogRevocation) -> "RevertRes":
        return cls(
            verification_id=revocation.action_log_id,
            revocation_id=revocation.id,
            reverted_by=revocation.reverted_by,
            reverted_at=revocation.reverted_at,
            reason=revocation.reason,
        )
