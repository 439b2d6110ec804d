"""
===============================================================================
TARJETA CRC — checkpoint/interfaces/api/http/routers/verifications.py
===============================================================================

Name:
    Verifications Router

Responsibilities:
    - Endpoints HTTP del motor de verificación: canje, elegibilidad,
      historial, listado/stats/diario por evento y reversión (admin).
    - Autorizar por rol (Principal del JWT) antes de invocar casos de uso.
    - Traducir VerificationError -> RFC7807 (error_mapping).

Collaborators:
    - application.usecases.verification (casos de uso)
    - container (factories para Depends)
    - identity.auth_users (require_roles, Principal)
    - schemas.verifications (DTOs)

Notas:
    - El verificador es SIEMPRE el sub del token; nunca viene en el body.
    - Los ids de path/query se pasan como str: la validación UUID la hace el
      caso de uso (INVALID_INPUT con formato RFC7807 uniforme).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from .....application.usecases.verification import (
    CheckEligibilityUseCase,
    GetDailyVerificationsUseCase,
    GetParticipantHistoryUseCase,
    GetVerificationStatsUseCase,
    ListEventVerificationsUseCase,
    RevertVerificationUseCase,
    VerifyParticipantActionUseCase,
)
from .....application.usecases.verification.get_daily_verifications import (
    DEFAULT_DAYS,
)
from .....container import (
    get_check_eligibility_use_case,
    get_daily_verifications_use_case,
    get_list_event_verifications_use_case,
    get_participant_history_use_case,
    get_revert_verification_use_case,
    get_verification_stats_use_case,
    get_verify_participant_action_use_case,
)
from .....crosscutting.error_responses import internal_error
from .....crosscutting.pagination import PageMeta
from .....domain.value_objects import VerificationFilters
from .....identity.auth_users import (
    ORGANIZER_ROLES,
    STAFF_ROLES,
    Principal,
    require_roles,
)
from .....identity.users import UserRole
from ..error_mapping import raise_verification_error
from ..schemas.verifications import (
    DailyCountRes,
    DailyVerificationsRes,
    EligibilityRes,
    ParticipantHistoryRes,
    RevertReq,
    RevertRes,
    VerificationListRes,
    VerificationRecordRes,
    VerificationStatsRes,
    VerifyReq,
    VerifyRes,
)

router = APIRouter()


# =============================================================================
# Canje (staff)
# =============================================================================


@router.post("/verify", response_model=VerifyRes, tags=["verification"])
def verify(
    req: VerifyReq,
    use_case: VerifyParticipantActionUseCase = Depends(
        get_verify_participant_action_use_case
    ),
    principal: Principal = Depends(require_roles(*STAFF_ROLES)),
):
    result = use_case.execute(
        credential=req.qr_code_data,
        action_code=req.action_code,
        verifier_id=principal.user_id,
    )
    if result.error is not None:
        raise_verification_error(result.error)
    if result.redemption_id is None or result.timestamp is None:
        raise internal_error("Resultado de canje incompleto.")

    return VerifyRes(
        success=result.success,
        message=result.message,
        redemption_id=result.redemption_id,
        participant_name=result.participant_name or "",
        action_name=result.action_name or "",
        event_title=result.event_title or "",
        timestamp=result.timestamp,
    )


@router.get(
    "/verify/eligibility", response_model=EligibilityRes, tags=["verification"]
)
def check_eligibility(
    participant_id: str = Query(...),
    action_id: str = Query(...),
    use_case: CheckEligibilityUseCase = Depends(get_check_eligibility_use_case),
    _principal: Principal = Depends(require_roles(*STAFF_ROLES)),
):
    """
    Dry-run: nunca registra.

    Un gate fallido responde igual que POST /verify (RFC7807 con el mismo
    kind y status), sin registrar el canje.
    """
    result = use_case.execute(participant_id, action_id)
    if result.error is not None:
        raise_verification_error(result.error)

    return EligibilityRes(eligible=result.eligible)


@router.get(
    "/participants/{participant_id}/verifications",
    response_model=ParticipantHistoryRes,
    tags=["verification"],
)
def participant_history(
    participant_id: str,
    use_case: GetParticipantHistoryUseCase = Depends(get_participant_history_use_case),
    _principal: Principal = Depends(require_roles(*STAFF_ROLES)),
):
    result = use_case.execute(participant_id)
    if result.error is not None:
        raise_verification_error(result.error)

    return ParticipantHistoryRes(
        verifications=[VerificationRecordRes.from_record(r) for r in result.records],
    )


# =============================================================================
# Reportes por evento (organizer/admin)
# =============================================================================


@router.get(
    "/events/{event_id}/verifications",
    response_model=VerificationListRes,
    tags=["reporting"],
)
def list_event_verifications(
    event_id: str,
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    action_id: UUID | None = Query(None),
    verifier_id: UUID | None = Query(None),
    page: int = Query(1),
    page_size: int = Query(20),
    use_case: ListEventVerificationsUseCase = Depends(
        get_list_event_verifications_use_case
    ),
    _principal: Principal = Depends(require_roles(*ORGANIZER_ROLES)),
):
    filters = VerificationFilters(
        date_from=date_from,
        date_to=date_to,
        action_id=action_id,
        verifier_id=verifier_id,
        page=page,
        page_size=page_size,
    )
    result = use_case.execute(event_id, filters)
    if result.error is not None:
        raise_verification_error(result.error)

    return VerificationListRes(
        verifications=[VerificationRecordRes.from_record(r) for r in result.records],
        meta=PageMeta(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get(
    "/events/{event_id}/verifications/stats",
    response_model=VerificationStatsRes,
    tags=["reporting"],
)
def verification_stats(
    event_id: str,
    use_case: GetVerificationStatsUseCase = Depends(get_verification_stats_use_case),
    _principal: Principal = Depends(require_roles(*ORGANIZER_ROLES)),
):
    result = use_case.execute(event_id)
    if result.error is not None:
        raise_verification_error(result.error)
    if result.stats is None:
        raise internal_error("Stats no disponibles.")

    return VerificationStatsRes.from_stats(result.stats)


@router.get(
    "/events/{event_id}/verifications/daily",
    response_model=DailyVerificationsRes,
    tags=["reporting"],
)
def daily_verifications(
    event_id: str,
    days: int = Query(DEFAULT_DAYS),
    use_case: GetDailyVerificationsUseCase = Depends(get_daily_verifications_use_case),
    _principal: Principal = Depends(require_roles(*ORGANIZER_ROLES)),
):
    result = use_case.execute(event_id, days)
    if result.error is not None:
        raise_verification_error(result.error)

    return DailyVerificationsRes(
        days=[DailyCountRes.from_count(item) for item in result.days],
    )


# =============================================================================
# Reversión (admin)
# =============================================================================


@router.post(
    "/admin/verifications/{verification_id}/revert",
    response_model=RevertRes,
    tags=["admin"],
)
def revert_verification(
    verification_id: str,
    req: RevertReq | None = None,
    use_case: RevertVerificationUseCase = Depends(get_revert_verification_use_case),
    principal: Principal = Depends(require_roles(UserRole.ADMIN)),
):
    result = use_case.execute(
        verification_id=verification_id,
        admin_id=principal.user_id,
        reason=req.reason if req else None,
    )
    if result.error is not None:
        raise_verification_error(result.error)
    if result.revocation is None:
        raise internal_error("Reversión no registrada.")

    return RevertRes.from_revocation(result.revocation)
