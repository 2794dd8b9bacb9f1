"""In-memory identity provider for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from secrets import compare_digest, token_urlsafe
from uuid import uuid4

from app.adapters.auth.base import (
    AuthVerificationError,
    IdentityProvider,
    ProviderError,
    SignInResult,
    SignUpResult,
)
from app.schemas.auth import AuthSession, Identity

_SESSION_TTL_SECONDS = 3600


@dataclass(slots=True)
class UserRecord:
    id: str
    email: str
    password: str
    confirmed: bool
    created_at: datetime


@dataclass(slots=True)
class InMemoryIdentityProvider(IdentityProvider):
    """Deterministic stand-in for the managed auth service.

    Accounts, access tokens and refresh tokens live in dictionaries. Signup
    withholds a session until ``confirm_email`` is called when
    ``require_email_confirmation`` is set.
    """

    require_email_confirmation: bool = True
    users: dict[str, UserRecord] = field(default_factory=dict)
    access_tokens: dict[str, str] = field(default_factory=dict)
    refresh_tokens: dict[str, str] = field(default_factory=dict)
    session_refresh_tokens: dict[str, str] = field(default_factory=dict)
    verify_calls: int = 0

    def create_user(self, email: str, password: str, *, confirmed: bool = True) -> Identity:
        if self._find(email) is not None:
            raise ProviderError("User already registered")
        record = UserRecord(
            id=str(uuid4()),
            email=email.strip().lower(),
            password=password,
            confirmed=confirmed,
            created_at=datetime.now(UTC),
        )
        self.users[record.id] = record
        return self._to_identity(record)

    def confirm_email(self, user_id: str) -> None:
        self.users[user_id].confirmed = True

    def issue_session(self, user_id: str) -> AuthSession:
        access_token = token_urlsafe(24)
        refresh_token = token_urlsafe(24)
        self.access_tokens[access_token] = user_id
        self.refresh_tokens[refresh_token] = user_id
        self.session_refresh_tokens[access_token] = refresh_token
        now = int(datetime.now(UTC).timestamp())
        return AuthSession(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=_SESSION_TTL_SECONDS,
            expires_at=now + _SESSION_TTL_SECONDS,
        )

    async def verify_token(self, token: str) -> Identity:
        self.verify_calls += 1
        user_id = self.access_tokens.get(token)
        if user_id is None or user_id not in self.users:
            raise AuthVerificationError("Invalid JWT")
        return self._to_identity(self.users[user_id])

    async def sign_up(self, email: str, password: str) -> SignUpResult:
        identity = self.create_user(email, password, confirmed=not self.require_email_confirmation)
        if self.require_email_confirmation:
            return SignUpResult(user=identity, session=None)
        return SignUpResult(user=identity, session=self.issue_session(identity.id))

    async def sign_in(self, email: str, password: str) -> SignInResult:
        record = self._find(email)
        if record is None or not compare_digest(record.password, password):
            raise ProviderError("Invalid login credentials")
        if not record.confirmed:
            raise ProviderError("Email not confirmed")
        return SignInResult(user=self._to_identity(record), session=self.issue_session(record.id))

    async def sign_out(self, token: str) -> None:
        if self.access_tokens.pop(token, None) is None:
            raise ProviderError("Session not found")
        # Only the signed-out session ends; other sessions of the same user stay valid.
        paired_refresh = self.session_refresh_tokens.pop(token, None)
        if paired_refresh is not None:
            self.refresh_tokens.pop(paired_refresh, None)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        user_id = self.refresh_tokens.pop(refresh_token, None)
        if user_id is None:
            raise ProviderError("Invalid Refresh Token: Refresh Token Not Found")
        return self.issue_session(user_id)

    async def find_user_by_email(self, email: str) -> Identity | None:
        record = self._find(email)
        return self._to_identity(record) if record is not None else None

    async def update_user_password(self, user_id: str, password: str) -> None:
        record = self.users.get(user_id)
        if record is None:
            raise ProviderError("User not found")
        record.password = password

    def _find(self, email: str) -> UserRecord | None:
        normalized = email.strip().lower()
        for record in self.users.values():
            if record.email == normalized:
                return record
        return None

    @staticmethod
    def _to_identity(record: UserRecord) -> Identity:
        return Identity(
            id=record.id,
            email=record.email,
            created_at=record.created_at.isoformat(),
            email_confirmed=record.confirmed,
        )


__all__ = ["InMemoryIdentityProvider", "UserRecord"]
