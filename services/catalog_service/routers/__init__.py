"""Catalog service routers."""

from services.catalog_service.routers.coaches import router as coaches_router
from services.catalog_service.routers.internal import router as internal_router
from services.catalog_service.routers.programs import router as programs_router

__all__ = [
    "coaches_router",
    "internal_router",
    "programs_router",
]
