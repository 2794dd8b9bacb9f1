"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    backend: Literal["memory", "supabase"] = "supabase"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None
    frontend_url: str = "http://localhost:3000"
    reset_token_ttl_minutes: int = 60
    resend_api_key: str | None = None
    resend_from_email: str | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    require_email_confirmation: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="TASKBOARD_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
