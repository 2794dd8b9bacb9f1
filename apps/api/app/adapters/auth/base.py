"""Identity provider interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.schemas.auth import AuthSession, Identity


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class ProviderError(Exception):
    """Raised when the identity provider rejects an account operation.

    The message is the provider's own and may be shown to callers where it is
    not security-sensitive.
    """


@dataclass(slots=True)
class SignUpResult:
    user: Identity | None
    session: AuthSession | None


@dataclass(slots=True)
class SignInResult:
    user: Identity
    session: AuthSession


class IdentityProvider(ABC):
    """Provider-neutral identity interface used by the gate and account flows."""

    @abstractmethod
    async def verify_token(self, token: str) -> Identity:
        """Verify an access token and return the identity it represents."""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> SignUpResult:
        """Create credentials; the session is ``None`` when confirmation is pending."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Exchange email/password for a session."""

    @abstractmethod
    async def sign_out(self, token: str) -> None:
        """Revoke the session the access token belongs to."""

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Identity | None:
        """Administrative lookup of an account by email."""

    @abstractmethod
    async def update_user_password(self, user_id: str, password: str) -> None:
        """Administrative password change for an account."""


__all__ = [
    "AuthVerificationError",
    "IdentityProvider",
    "ProviderError",
    "SignInResult",
    "SignUpResult",
]
