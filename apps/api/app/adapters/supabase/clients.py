"""Lazily constructed Supabase clients shared by the auth and table adapters."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from supabase import AsyncClient, AsyncClientOptions, acreate_client

from app.errors import ConfigurationError


def dump_model(value: Any) -> dict[str, Any]:
    """Normalize SDK response models (pydantic) and plain dicts to dicts."""
    if isinstance(value, dict):
        return value
    return value.model_dump(mode="json")


class SupabaseClients:
    """Holds project credentials and hands out async clients.

    ``public`` and ``service`` clients are created on first use and reused for
    the process lifetime; they never hold a user session. Calls that issue a
    session (sign up, sign in, refresh) get a fresh ``session`` client so no
    session state is shared between requests.
    """

    def __init__(self, url: str, anon_key: str, service_role_key: str | None = None) -> None:
        self._url = url
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._public: AsyncClient | None = None
        self._service: AsyncClient | None = None

    @staticmethod
    def _options() -> AsyncClientOptions:
        return AsyncClientOptions(persist_session=False, auto_refresh_token=False)

    async def public(self) -> AsyncClient:
        if self._public is None:
            self._public = await acreate_client(self._url, self._anon_key, options=self._options())
        return self._public

    async def service(self) -> AsyncClient:
        if not self._service_role_key:
            raise ConfigurationError("TASKBOARD_SUPABASE_SERVICE_ROLE_KEY is required for administrative calls")
        if self._service is None:
            self._service = await acreate_client(self._url, self._service_role_key, options=self._options())
        return self._service

    async def tables(self) -> AsyncClient:
        # Row-level security applies when only the anon key is configured.
        if self._service_role_key:
            return await self.service()
        return await self.public()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncClient]:
        """Yield a short-lived client for a session-issuing call and close its HTTP pool afterwards."""
        client = await acreate_client(self._url, self._anon_key, options=self._options())
        try:
            yield client
        finally:
            await client.auth.close()


__all__ = ["SupabaseClients", "dump_model"]
