"""Supabase Auth (GoTrue) identity provider adapter."""

from __future__ import annotations

from supabase import AuthError

from app.adapters.auth.base import (
    AuthVerificationError,
    IdentityProvider,
    ProviderError,
    SignInResult,
    SignUpResult,
)
from app.adapters.supabase.clients import SupabaseClients, dump_model
from app.schemas.auth import AuthSession, Identity

_ADMIN_PAGE_SIZE = 200


class SupabaseIdentityProvider(IdentityProvider):
    """Delegates token verification and account operations to Supabase Auth."""

    def __init__(self, clients: SupabaseClients) -> None:
        self._clients = clients

    async def verify_token(self, token: str) -> Identity:
        client = await self._clients.public()
        try:
            response = await client.auth.get_user(token)
        except AuthError as exc:
            raise AuthVerificationError("Invalid bearer token") from exc

        if response is None or response.user is None:
            raise AuthVerificationError("Bearer token missing user identity")
        return self._to_identity(response.user)

    async def sign_up(self, email: str, password: str) -> SignUpResult:
        async with self._clients.session() as client:
            try:
                response = await client.auth.sign_up({"email": email, "password": password})
            except AuthError as exc:
                raise ProviderError(str(exc)) from exc

        return SignUpResult(
            user=self._to_identity(response.user) if response.user is not None else None,
            session=self._to_session(response.session) if response.session is not None else None,
        )

    async def sign_in(self, email: str, password: str) -> SignInResult:
        async with self._clients.session() as client:
            try:
                response = await client.auth.sign_in_with_password({"email": email, "password": password})
            except AuthError as exc:
                raise ProviderError(str(exc)) from exc

        if response.user is None or response.session is None:
            raise ProviderError("Invalid login credentials")
        return SignInResult(user=self._to_identity(response.user), session=self._to_session(response.session))

    async def sign_out(self, token: str) -> None:
        client = await self._clients.public()
        try:
            # Local scope ends only the session this access token belongs to.
            await client.auth.admin.sign_out(token, scope="local")
        except AuthError as exc:
            raise ProviderError(str(exc)) from exc

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        async with self._clients.session() as client:
            try:
                response = await client.auth.refresh_session(refresh_token)
            except AuthError as exc:
                raise ProviderError(str(exc)) from exc

        if response.session is None:
            raise ProviderError("Invalid Refresh Token")
        return self._to_session(response.session)

    async def find_user_by_email(self, email: str) -> Identity | None:
        client = await self._clients.service()
        normalized = email.strip().lower()
        page = 1
        while True:
            try:
                users = await client.auth.admin.list_users(page=page, per_page=_ADMIN_PAGE_SIZE)
            except AuthError as exc:
                raise ProviderError(str(exc)) from exc

            for user in users:
                if (user.email or "").lower() == normalized:
                    return self._to_identity(user)
            if len(users) < _ADMIN_PAGE_SIZE:
                return None
            page += 1

    async def update_user_password(self, user_id: str, password: str) -> None:
        client = await self._clients.service()
        try:
            await client.auth.admin.update_user_by_id(user_id, {"password": password})
        except AuthError as exc:
            raise ProviderError(str(exc)) from exc

    @staticmethod
    def _to_identity(user: object) -> Identity:
        return Identity.model_validate(dump_model(user))

    @staticmethod
    def _to_session(session: object) -> AuthSession:
        return AuthSession.model_validate(dump_model(session))


__all__ = ["SupabaseIdentityProvider"]
