# checkpoint/crosscutting/pagination.py
"""
===============================================================================
MÓDULO: Utilidades de paginación (page / page_size)
===============================================================================

Objetivo
--------
Paginación simple y consistente para listados:
- normalización de page/page_size (clamp a defaults)
- cálculo de offset y total_pages
- metadata genérica PageMeta para las respuestas HTTP

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  normalize_page + total_pages_for + PageMeta

Responsabilidades:
  - Normalizar inputs de paginación (page >= 1, page_size en [1, max])
  - Calcular total_pages = ceil(total / page_size)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Página ya normalizada."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def normalize_page(
    page: int | None,
    page_size: int | None,
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """
    Normaliza page/page_size.

    Reglas:
      - page < 1 (o None) => 1
      - page_size fuera de [1, max_page_size] (o None) => default_page_size
        (no se recorta al máximo: un valor fuera de rango vuelve al default)
    """
    normalized_page = page if page is not None and page >= 1 else DEFAULT_PAGE
    if page_size is None or page_size < 1 or page_size > max_page_size:
        page_size = default_page_size
    return PageRequest(page=normalized_page, page_size=page_size)


def total_pages_for(total: int, page_size: int) -> int:
    """ceil(total / page_size) sin floats; 0 si no hay resultados."""
    if total <= 0 or page_size <= 0:
        return 0
    return (total + page_size - 1) // page_size


class PageMeta(BaseModel):
    page: int = Field(description="Página actual (1-based)")
    page_size: int = Field(description="Tamaño de página aplicado")
    total: int = Field(description="Total de items que matchean los filtros")
    total_pages: int = Field(description="Cantidad de páginas")
