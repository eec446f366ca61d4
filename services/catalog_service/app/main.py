"""FastAPI application for the Catalog Service."""

from fastapi import FastAPI
from libs.common.errors import register_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.catalog_service.routers import (
    coaches_router,
    internal_router,
    programs_router,
)


def create_app() -> FastAPI:
    """Create and configure the Catalog Service FastAPI app."""
    app = FastAPI(
        title="Coaching Program Catalog Service",
        version="0.1.0",
        description="Coaching program discovery, authoring and seat capacity.",
    )
    add_observability_middleware(app)
    register_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "catalog"}

    # Domain routers (all prefixed /catalog)
    app.include_router(programs_router, prefix="/catalog")
    app.include_router(coaches_router, prefix="/catalog")
    app.include_router(internal_router, prefix="/catalog")

    return app


app = create_app()
