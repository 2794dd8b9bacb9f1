"""Construction of the external service handles used by every request."""

from __future__ import annotations

from dataclasses import dataclass

from app.adapters.auth import IdentityProvider, InMemoryIdentityProvider, SupabaseIdentityProvider
from app.adapters.reset_links import InMemoryResetLinkSender, ResendResetLinkSender, ResetLinkSender
from app.adapters.supabase import SupabaseClients
from app.core.config import Settings
from app.errors import ConfigurationError
from app.repositories import InMemoryTableClient, SupabaseTableClient, TableClient


@dataclass(frozen=True, slots=True)
class Backend:
    """Stateless handles to the identity provider, table storage and link delivery."""

    identity: IdentityProvider
    tables: TableClient
    reset_links: ResetLinkSender


def build_memory_backend(*, require_email_confirmation: bool = True) -> Backend:
    return Backend(
        identity=InMemoryIdentityProvider(require_email_confirmation=require_email_confirmation),
        tables=InMemoryTableClient(),
        reset_links=InMemoryResetLinkSender(),
    )


def build_backend(settings: Settings) -> Backend:
    if settings.backend == "memory":
        return build_memory_backend(require_email_confirmation=settings.require_email_confirmation)

    if not settings.supabase_url or not settings.supabase_anon_key:
        raise ConfigurationError(
            "TASKBOARD_SUPABASE_URL and TASKBOARD_SUPABASE_ANON_KEY are required for the supabase backend"
        )
    if not settings.resend_api_key or not settings.resend_from_email:
        raise ConfigurationError(
            "TASKBOARD_RESEND_API_KEY and TASKBOARD_RESEND_FROM_EMAIL are required to deliver password reset links"
        )
    clients = SupabaseClients(
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        service_role_key=settings.supabase_service_role_key,
    )
    return Backend(
        identity=SupabaseIdentityProvider(clients),
        tables=SupabaseTableClient(clients),
        reset_links=ResendResetLinkSender(
            api_key=settings.resend_api_key,
            from_email=settings.resend_from_email,
            api_url=settings.resend_api_url,
        ),
    )


__all__ = ["Backend", "build_backend", "build_memory_backend"]
