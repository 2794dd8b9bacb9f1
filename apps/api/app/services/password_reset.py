"""Locally managed password reset tokens.

A forgot-password request stores only a salted SHA-256 hash of a random token
together with its expiry. The raw token travels to the account holder inside a
reset link. Every rejection path of a reset attempt returns the same error.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
import hashlib
import logging
from secrets import compare_digest, token_hex, token_urlsafe
from urllib.parse import urlencode

from app.adapters.auth.base import IdentityProvider, ProviderError
from app.adapters.reset_links import ResetLinkSender
from app.core.logging_safety import safe_email_identifier, safe_log_identifier
from app.errors import ApiError
from app.repositories.base import Row, TableClient
from app.schemas.auth import Identity
from app.services.common import storage_errors

logger = logging.getLogger(__name__)

RESET_TOKENS_TABLE = "password_reset_tokens"
RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."
RESET_COMPLETED_MESSAGE = "Password has been reset successfully"
INVALID_TOKEN_MESSAGE = "Invalid or expired reset token"


def hash_reset_token(token: str, *, salt: str | None = None) -> str:
    """Return ``salt$hexdigest`` for storage."""
    salt = salt or token_hex(16)
    digest = hashlib.sha256(f"{salt}:{token}".encode("utf-8")).hexdigest()
    return f"{salt}${digest}"


def verify_reset_token(token: str, stored_hash: str) -> bool:
    salt, separator, _ = stored_hash.partition("$")
    if not separator or not salt:
        return False
    return compare_digest(hash_reset_token(token, salt=salt), stored_hash)


def _parse_timestamp(value: str | datetime) -> datetime:
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _invalid_token() -> ApiError:
    return ApiError(status_code=400, message=INVALID_TOKEN_MESSAGE)


class PasswordResetService:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        tables: TableClient,
        reset_links: ResetLinkSender,
        frontend_url: str,
        token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._identity = identity
        self._tables = tables
        self._reset_links = reset_links
        self._frontend_url = frontend_url.rstrip("/")
        self._token_ttl = token_ttl
        self._clock = clock

    async def request_reset(self, *, email: str) -> str:
        """Issue a reset token when the account exists; the reply never says whether it does."""
        normalized = email.strip().lower()
        try:
            identity = await self._identity.find_user_by_email(normalized)
            if identity is None:
                logger.info("password_reset.unknown_email email=%s", safe_email_identifier(normalized))
            else:
                await self._issue_token(identity, normalized)
        except Exception:
            logger.exception("password_reset.request_failed email=%s", safe_email_identifier(normalized))
        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, *, email: str, token: str, new_password: str) -> str:
        normalized = email.strip().lower()
        with storage_errors("password_reset.lookup"):
            row = await self._tables.select_one(
                RESET_TOKENS_TABLE,
                filters={"email": normalized, "used": False},
                order_by="created_at",
                descending=True,
            )
        if row is None or not self._is_live(row) or not verify_reset_token(token, str(row.get("token_hash", ""))):
            logger.warning("password_reset.rejected email=%s", safe_email_identifier(normalized))
            raise _invalid_token()

        # Guarded on used=false so a token can be consumed only once.
        with storage_errors("password_reset.consume"):
            consumed = await self._tables.update(
                RESET_TOKENS_TABLE,
                filters={"id": row["id"], "used": False},
                values={"used": True},
            )
        if not consumed:
            logger.warning("password_reset.already_consumed email=%s", safe_email_identifier(normalized))
            raise _invalid_token()

        user_id = str(row["user_id"])
        try:
            await self._identity.update_user_password(user_id, new_password)
        except ProviderError as exc:
            logger.error(
                "password_reset.update_failed principal_id=%s error=%s",
                safe_log_identifier(user_id, prefix="pid"),
                exc,
            )
            raise ApiError(status_code=400, message="Failed to reset password") from exc

        logger.info("password_reset.completed principal_id=%s", safe_log_identifier(user_id, prefix="pid"))
        return RESET_COMPLETED_MESSAGE

    async def _issue_token(self, identity: Identity, email: str) -> None:
        token = token_urlsafe(32)
        now = self._clock()
        await self._tables.insert(
            RESET_TOKENS_TABLE,
            {
                "user_id": identity.id,
                "email": email,
                "token_hash": hash_reset_token(token),
                "expires_at": (now + self._token_ttl).isoformat(),
                "used": False,
                "created_at": now.isoformat(),
            },
        )
        link = f"{self._frontend_url}/reset-password?{urlencode({'token': token, 'email': email})}"
        await self._reset_links.deliver(email=email, link=link)

    def _is_live(self, row: Row) -> bool:
        expires_at = row.get("expires_at")
        if not expires_at:
            return False
        return _parse_timestamp(expires_at) > self._clock()
