"""
===============================================================================
USE CASE: List Event Verifications (Filtered + Paginated)
===============================================================================

Name:
    List Event Verifications Use Case

Business Goal:
    Paginar los canjes de un evento con filtros opcionales (rango de fechas,
    acción, verificador) para auditoría del organizador.

Why (Context / Intención):
    - page/page_size inválidos NO son error: se normalizan a defaults
      (page < 1 => 1; page_size fuera de [1, max] => default).
    - Un rango invertido (date_from > date_to) sí es error de input.
    - Fechas sin zona horaria se toman como UTC antes de comparar.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListEventVerificationsUseCase

Responsibilities:
    - Validar evento (EVENT_NOT_FOUND) y rango de fechas (INVALID_INPUT).
    - Normalizar paginación y calcular total_pages.
    - Delegar filtro + orden (verified_at DESC, id DESC) al repositorio.

Collaborators:
    - EventRepository.get_event
    - ActionLogRepository.list_by_event
    - crosscutting.pagination
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Final
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....crosscutting.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    normalize_page,
    total_pages_for,
)
from ....domain.repositories import ActionLogRepository, EventRepository
from ....domain.value_objects import VerificationFilters
from .input_validation import as_utc, require_uuid
from .verification_results import (
    VerificationErrorCode,
    VerificationListResult,
    persistence_error,
    verification_error,
)

_MSG_EVENT_NOT_FOUND: Final[str] = "Event not found."
_MSG_INVALID_RANGE: Final[str] = "date_from must be earlier than or equal to date_to."


class ListEventVerificationsUseCase:
    """Listado paginado de canjes de un evento."""

    def __init__(
        self,
        event_repository: EventRepository,
        action_log_repository: ActionLogRepository,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._events = event_repository
        self._logs = action_log_repository
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def execute(
        self,
        event_id: UUID | str,
        filters: VerificationFilters | None = None,
    ) -> VerificationListResult:
        # ---------------------------------------------------------------------
        # 1) Validar inputs (id + rango de fechas).
        # ---------------------------------------------------------------------
        event_uuid, error = require_uuid(event_id, "event_id")
        if error is not None:
            return VerificationListResult(error=error)

        filters = filters or VerificationFilters()
        filters = replace(
            filters,
            date_from=as_utc(filters.date_from),
            date_to=as_utc(filters.date_to),
        )
        if (
            filters.date_from is not None
            and filters.date_to is not None
            and filters.date_from > filters.date_to
        ):
            return VerificationListResult(
                error=verification_error(
                    VerificationErrorCode.INVALID_INPUT,
                    _MSG_INVALID_RANGE,
                    details={"field": "date_from"},
                )
            )

        # ---------------------------------------------------------------------
        # 2) Normalizar paginación.
        # ---------------------------------------------------------------------
        page = normalize_page(
            filters.page,
            filters.page_size,
            default_page_size=self._default_page_size,
            max_page_size=self._max_page_size,
        )
        filters = replace(filters, page=page.page, page_size=page.page_size)

        # ---------------------------------------------------------------------
        # 3) Evento + página.
        # ---------------------------------------------------------------------
        try:
            if self._events.get_event(event_uuid) is None:
                return VerificationListResult(
                    page=page.page,
                    page_size=page.page_size,
                    error=verification_error(
                        VerificationErrorCode.EVENT_NOT_FOUND, _MSG_EVENT_NOT_FOUND
                    ),
                )
            records, total = self._logs.list_by_event(
                event_uuid, filters, limit=page.page_size, offset=page.offset
            )
        except DatabaseError as exc:
            logger.exception(
                "event verification listing failed on store",
                extra={"event_id": str(event_uuid), "error_id": exc.error_id},
            )
            return VerificationListResult(error=persistence_error(exc))

        return VerificationListResult(
            records=records,
            total=total,
            page=page.page,
            page_size=page.page_size,
            total_pages=total_pages_for(total, page.page_size),
        )
