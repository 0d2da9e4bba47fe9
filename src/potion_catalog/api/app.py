"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from potion_catalog.api.analytics import router as analytics_router
from potion_catalog.api.auth import router as auth_router
from potion_catalog.api.potions import router as potions_router
from potion_catalog.app_logging import configure_logging
from potion_catalog.config import parse_cors_origins
from potion_catalog.containers import AppContainer
from potion_catalog.errors import ApiError, ValidationFailed


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.prepare_storage()
        except Exception:
            logger.exception("Failed to prepare storage indexes")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(potions_router)
    app.include_router(analytics_router)

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"error": _describe_request_errors(exc)}
        )

    @app.exception_handler(PyMongoError)
    async def handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error(
            "Store operation failed",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_body(exc: ApiError) -> dict[str, object]:
    """Return the JSON body for a service error."""
    if isinstance(exc, ValidationFailed) and exc.field_errors:
        return {
            "errors": [
                {"msg": error.message, "param": error.field, "location": "body"}
                for error in exc.field_errors
            ]
        }
    return {"error": exc.message}


def _describe_request_errors(exc: RequestValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg', 'invalid')}")
    return "Invalid request: " + "; ".join(details)
