"""Dependency wiring for routes."""

from __future__ import annotations

from datetime import timedelta
import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import AuthVerificationError, IdentityProvider
from app.core.backend import Backend
from app.core.config import Settings, get_settings
from app.core.logging_safety import safe_log_identifier
from app.errors import ApiError
from app.repositories.base import TableClient
from app.schemas.auth import Identity
from app.services.accounts import AccountService
from app.services.categories import CategoryService
from app.services.password_reset import PasswordResetService
from app.services.tasks import TaskService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Authentication required. Please sign in."
AUTH_FAILED_MESSAGE = "Authentication failed"


def _auth_required() -> ApiError:
    return ApiError(status_code=401, message=AUTH_REQUIRED_MESSAGE)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Extract a non-blank bearer token, or ``None`` when absent or malformed."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    token = (credentials.credentials or "").strip()
    return token or None


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_identity_provider(backend: Annotated[Backend, Depends(get_backend)]) -> IdentityProvider:
    return backend.identity


def get_table_client(backend: Annotated[Backend, Depends(get_backend)]) -> TableClient:
    return backend.tables


async def get_authenticated_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> Identity:
    """Verify the bearer token and attach the resolved identity to the request."""
    correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    token = bearer_token(credentials)
    if token is None:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_required()

    try:
        identity = await provider.verify_token(token)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_required() from exc
    except Exception as exc:
        logger.exception(
            "auth.error correlation_id=%s method=%s path=%s",
            correlation_id,
            request.method,
            request.url.path,
        )
        raise ApiError(status_code=500, message=AUTH_FAILED_MESSAGE) from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s",
        correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(identity.id, prefix="pid"),
    )
    request.state.identity = identity
    return identity


async def get_optional_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> Identity | None:
    """Resolve the caller when possible; never rejects the request."""
    token = bearer_token(credentials)
    if token is None:
        return None

    try:
        identity = await provider.verify_token(token)
    except Exception:
        logger.debug(
            "auth.optional_skipped correlation_id=%s path=%s",
            safe_log_identifier(_request_correlation_id(request), prefix="cid"),
            request.url.path,
        )
        return None

    request.state.identity = identity
    return identity


def get_account_service(provider: Annotated[IdentityProvider, Depends(get_identity_provider)]) -> AccountService:
    return AccountService(provider)


def get_password_reset_service(
    backend: Annotated[Backend, Depends(get_backend)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PasswordResetService:
    return PasswordResetService(
        identity=backend.identity,
        tables=backend.tables,
        reset_links=backend.reset_links,
        frontend_url=settings.frontend_url,
        token_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
    )


def get_task_service(tables: Annotated[TableClient, Depends(get_table_client)]) -> TaskService:
    return TaskService(tables)


def get_category_service(tables: Annotated[TableClient, Depends(get_table_client)]) -> CategoryService:
    return CategoryService(tables)
