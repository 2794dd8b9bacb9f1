"""Identity provider adapters."""

from .base import AuthVerificationError, IdentityProvider, ProviderError, SignInResult, SignUpResult
from .memory_auth import InMemoryIdentityProvider
from .supabase_auth import SupabaseIdentityProvider

__all__ = [
    "AuthVerificationError",
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "ProviderError",
    "SignInResult",
    "SignUpResult",
    "SupabaseIdentityProvider",
]
