"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from app.core.backend import Backend, build_backend
from app.core.config import get_settings
from app.errors import ApiError
from app.routes import auth, auth_router, categories, categories_router, tasks, tasks_router
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_DEFAULT_VALIDATION_MESSAGE = "Invalid request payload"

# Keyed by endpoint function so the lookup is independent of the mount prefix.
_VALIDATION_MESSAGES: dict[Callable[..., Any], str] = {
    auth.sign_up: "Email and password are required",
    auth.sign_in: "Email and password are required",
    auth.refresh_session: "Refresh token is required",
    auth.forgot_password: "Email is required",
    auth.reset_password: "Email, token, and new password are required",
    tasks.create_task: "Title is required",
    tasks.update_task: "Invalid task payload",
    categories.create_category: "Category name is required",
    categories.rename_category: "Category name is required",
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(backend: Backend | None = None) -> FastAPI:
    settings = get_settings()
    logging.getLogger("app").setLevel(settings.log_level.upper())

    app = FastAPI(title="Taskboard API", version="1.0.0")
    app.state.backend = backend if backend is not None else build_backend(settings)

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.payload.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Missing or malformed request bodies are reported as 400 naming the required fields.
        endpoint = request.scope.get("endpoint")
        message = _VALIDATION_MESSAGES.get(endpoint, _DEFAULT_VALIDATION_MESSAGE)
        return _error_response(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed method=%s path=%s", request.method, request.url.path)
        return _error_response(500, "Internal server error")

    api_prefix = settings.api_prefix.rstrip("/")
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)
    app.include_router(categories_router, prefix=api_prefix)

    return app


def run() -> None:
    """Serve the application with uvicorn (``taskboard-api`` console script)."""
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


app = create_app()
