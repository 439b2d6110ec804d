"""
===============================================================================
TARJETA CRC — checkpoint/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios + casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para repositorios.
  - Centralizar decisiones runtime basadas en Settings (zona del evento,
    fail-open del gate temporal, límites de paginación).

Colaboradores:
  - checkpoint.crosscutting.config.get_settings
  - checkpoint.domain.repositories.* (puertos)
  - checkpoint.infrastructure.repositories.* (implementaciones)
  - checkpoint.application.usecases.verification.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - Los casos de uso NO leen Settings: reciben todo por constructor.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.verification import (
    CheckEligibilityUseCase,
    GetDailyVerificationsUseCase,
    GetParticipantHistoryUseCase,
    GetVerificationStatsUseCase,
    ListEventVerificationsUseCase,
    RevertVerificationUseCase,
    VerifyParticipantActionUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    ActionLogRepository,
    EventRepository,
    ParticipantRepository,
    UserRepository,
)
from .infrastructure.repositories import (
    InMemoryActionLogRepository,
    InMemoryEventRepository,
    InMemoryParticipantRepository,
    InMemoryUserRepository,
    PostgresActionLogRepository,
    PostgresEventRepository,
    PostgresParticipantRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - app_env ∈ {"test", "testing", "ci"} => se usan adapters in-memory.
    """
    env = get_settings().app_env.strip().lower()
    return env in {"test", "testing", "ci"}


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_participant_repository() -> ParticipantRepository:
    """Participantes (in-memory en test; Postgres en runtime)."""
    if is_test_env():
        return InMemoryParticipantRepository()
    return PostgresParticipantRepository()


@lru_cache(maxsize=1)
def get_event_repository() -> EventRepository:
    """Eventos, días y registro de acciones."""
    if is_test_env():
        return InMemoryEventRepository()
    return PostgresEventRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Usuarios del personal (verificadores / admins)."""
    if is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_action_log_repository() -> ActionLogRepository:
    """
    Canjes y revocaciones.

    In-memory: comparte las mismas instancias de participantes/eventos/usuarios
    para poder resolver nombres (equivalente a los JOIN de Postgres).
    """
    if is_test_env():
        return InMemoryActionLogRepository(
            participants=get_participant_repository(),
            events=get_event_repository(),
            users=get_user_repository(),
        )
    return PostgresActionLogRepository()


# =============================================================================
# Casos de uso (instancia por request: son livianos y sin estado propio)
# =============================================================================


def get_verify_participant_action_use_case() -> VerifyParticipantActionUseCase:
    settings = get_settings()
    return VerifyParticipantActionUseCase(
        get_participant_repository(),
        get_event_repository(),
        get_user_repository(),
        get_action_log_repository(),
        event_zone=settings.get_event_zone(),
        temporal_gate_fail_open=settings.temporal_gate_fail_open,
    )


def get_check_eligibility_use_case() -> CheckEligibilityUseCase:
    settings = get_settings()
    return CheckEligibilityUseCase(
        get_participant_repository(),
        get_event_repository(),
        get_user_repository(),
        get_action_log_repository(),
        event_zone=settings.get_event_zone(),
        temporal_gate_fail_open=settings.temporal_gate_fail_open,
    )


def get_participant_history_use_case() -> GetParticipantHistoryUseCase:
    return GetParticipantHistoryUseCase(
        get_participant_repository(), get_action_log_repository()
    )


def get_list_event_verifications_use_case() -> ListEventVerificationsUseCase:
    settings = get_settings()
    return ListEventVerificationsUseCase(
        get_event_repository(),
        get_action_log_repository(),
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


def get_verification_stats_use_case() -> GetVerificationStatsUseCase:
    return GetVerificationStatsUseCase(
        get_event_repository(),
        get_participant_repository(),
        get_action_log_repository(),
        event_zone=get_settings().get_event_zone(),
    )


def get_daily_verifications_use_case() -> GetDailyVerificationsUseCase:
    settings = get_settings()
    return GetDailyVerificationsUseCase(
        get_event_repository(),
        get_action_log_repository(),
        event_zone=settings.get_event_zone(),
        max_days=settings.max_daily_window_days,
    )


def get_revert_verification_use_case() -> RevertVerificationUseCase:
    return RevertVerificationUseCase(
        get_user_repository(), get_action_log_repository()
    )
