"""
===============================================================================
TARJETA CRC — checkpoint/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers por feature para ser incluidos por el router principal.

Collaborators:
    - routers.verifications

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .verifications import router as verifications_router

__all__ = ["verifications_router"]
