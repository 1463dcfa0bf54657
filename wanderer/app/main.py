"""FastAPI application for Weekend Wanderer."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wanderer.app.api.routes.auth import router as auth_router
from wanderer.app.api.routes.health import router as health_router
from wanderer.app.api.routes.metrics import router as metrics_router
from wanderer.app.api.routes.trips import router as trips_router
from wanderer.app.config import get_settings
from wanderer.app.db.engine import get_engine, init_db
from wanderer.app.db.repositories import PersistenceError
from wanderer.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """Build the standard failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def validation_message(exc: RequestValidationError) -> str:
    """Human-readable message from the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    return f"{field}: {message}" if field and first.get("type") != "value_error" else message


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables when a database is configured."""
    if get_settings().database_url:
        init_db(get_engine())
        logger.info("Database tables ready")
    yield


def create_app() -> FastAPI:
    """Build the application with routes and error handlers."""
    configure_logging(get_settings().log_level)

    app = FastAPI(title="Weekend Wanderer API", version="0.1.0", lifespan=lifespan)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(auth_router, prefix="/api")
    app.include_router(trips_router, prefix="/api")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, validation_message(exc))

    @app.exception_handler(PersistenceError)
    async def store_failure(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/api/ping")
    async def ping() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "Weekend Wanderer API", "version": "0.1.0"}

    return app


app = create_app()
