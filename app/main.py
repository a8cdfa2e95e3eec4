"""FastAPI app factory: health endpoint, request logging and the payment route."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api.middleware import RequestLogMiddleware
from app.api.routes import router as api_router
from app.config import Settings, build_registry, load_settings
from app.domain.registry import ServiceRegistry
from app.logging_conf import get_logger, setup_logging

logger = get_logger("app")


def create_app(
    registry: ServiceRegistry | None = None, settings: Settings | None = None
) -> FastAPI:
    """Build the app around `registry`.

    Without an explicit registry one is built from the REGISTERED_SERVICES
    configuration, which is how the service is bootstrapped under uvicorn.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    if registry is None:
        registry = build_registry(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "startup",
            extra={"event": "startup", "registered_pairs": len(registry)},
        )
        yield
        logger.info("shutdown", extra={"event": "shutdown"})

    app = FastAPI(title="Payment Token Service", version=settings.app_version, lifespan=lifespan)
    app.state.registry = registry
    app.add_middleware(RequestLogMiddleware)

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn app.main:app --port 8080`
app = create_app()
