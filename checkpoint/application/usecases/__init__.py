"""
Use Cases Layer (Business Operations)

This package exposes entry points for business logic, organized by feature.

Structure
---------
usecases/
└── verification/   # Redemption, eligibility, history, stats, revocation

Usage
-----
Import from subpackages for clarity:

    from checkpoint.application.usecases.verification import VerifyParticipantActionUseCase

Or use the barrel exports from this module:

    from checkpoint.application.usecases import VerifyParticipantActionUseCase
"""

from .verification import (
    CheckEligibilityUseCase,
    DailyVerificationsResult,
    EligibilityResult,
    GetDailyVerificationsUseCase,
    GetParticipantHistoryUseCase,
    GetVerificationStatsUseCase,
    ListEventVerificationsUseCase,
    ParticipantHistoryResult,
    RevertVerificationResult,
    RevertVerificationUseCase,
    VerificationError,
    VerificationErrorCode,
    VerificationListResult,
    VerificationStatsResult,
    VerifyActionResult,
    VerifyParticipantActionUseCase,
)

__all__ = [
    "VerifyParticipantActionUseCase",
    "CheckEligibilityUseCase",
    "GetParticipantHistoryUseCase",
    "ListEventVerificationsUseCase",
    "GetVerificationStatsUseCase",
    "GetDailyVerificationsUseCase",
    "RevertVerificationUseCase",
    "VerifyActionResult",
    "EligibilityResult",
    "ParticipantHistoryResult",
    "VerificationListResult",
    "VerificationStatsResult",
    "DailyVerificationsResult",
    "RevertVerificationResult",
    "VerificationError",
    "VerificationErrorCode",
]
