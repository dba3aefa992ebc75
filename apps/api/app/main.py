"""FastAPI application entrypoint."""

from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.logger import configure_logging, safe_log_identifier
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.routes import health_router, users_router
from app.schemas.error import ErrorResponse


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logger = configure_logging(settings)

    app = FastAPI(title="Acquisitions API", version="1.0.0")
    app.state.settings = settings
    app.state.logger = logger
    app.state.store = InMemoryStore()
    app.state.started_at = time.monotonic()

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = getattr(request.state, "correlation_id", None)
        logger.error(
            "request.failed correlation_id=%s method=%s path=%s error_type=%s",
            safe_log_identifier(correlation_id, prefix="cid"),
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        payload = ErrorResponse(
            error="Internal Server Error",
            message="Something went wrong" if settings.environment == "production" else str(exc),
        )
        return JSONResponse(status_code=500, content=payload.model_dump(mode="json"))

    app.include_router(health_router)
    app.include_router(users_router, prefix="/api")

    logger.info("app.started environment=%s auth_provider=%s", settings.environment, settings.auth_provider)
    return app


app = create_app()
