"""
===============================================================================
VERIFICATION USE CASES PACKAGE (Public API / Exports)
===============================================================================

Name:
    Verification Use Cases (package exports)

Business Goal:
    Exponer una API pública y estable para el motor de verificación:
    canje, dry-run de elegibilidad, consultas y reversión.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    verification usecases package (__init__.py)

Responsibilities:
    - Re-exportar los casos de uso y sus resultados/errores.
    - Definir __all__ como contrato de API pública del paquete.

Collaborators:
    - container.py (construye los casos de uso)
    - interfaces/api/http/routers/verifications.py
===============================================================================
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Use Cases
# -----------------------------------------------------------------------------
from .check_eligibility import CheckEligibilityUseCase
from .eligibility import EligibilityEvaluator, EligibilityOutcome
from .get_daily_verifications import GetDailyVerificationsUseCase
from .get_participant_history import GetParticipantHistoryUseCase
from .get_verification_stats import GetVerificationStatsUseCase
from .list_event_verifications import ListEventVerificationsUseCase
from .revert_verification import RevertVerificationUseCase
# -----------------------------------------------------------------------------
# DTOs / Result models
# -----------------------------------------------------------------------------
from .verification_results import (
    DailyVerificationsResult,
    EligibilityResult,
    ParticipantHistoryResult,
    RevertVerificationResult,
    VerificationError,
    VerificationErrorCode,
    VerificationListResult,
    VerificationStatsResult,
    VerifyActionResult,
)
from .verify_participant_action import VerifyParticipantActionUseCase

__all__ = [
    # Use cases
    "VerifyParticipantActionUseCase",
    "CheckEligibilityUseCase",
    "GetParticipantHistoryUseCase",
    "ListEventVerificationsUseCase",
    "GetVerificationStatsUseCase",
    "GetDailyVerificationsUseCase",
    "RevertVerificationUseCase",
    "EligibilityEvaluator",
    "EligibilityOutcome",
    # Results / errors
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
