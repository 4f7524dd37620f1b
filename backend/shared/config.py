"""
Centralized configuration for the HRDC assistant.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., PAYSTACK_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "HRDC Assistant"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server (trusted backend)
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    # Local session persistence
    session_storage_path: str = "~/.hrdc/session.json"
    session_key_prefix: str = "supabase.auth.token"
    session_key_suffix: str = ""

    # AI responder webhook
    responder_url: str = "https://agents.customcx.com/webhook/HDRC"
    responder_timeout: float = 20.0

    # Remote call deadlines (seconds)
    store_timeout: float = 3.0
    profile_fetch_timeout: float = 2.5

    # Frontend URLs (for auth redirects)
    frontend_url: str = "http://localhost:5173"

    # Paystack
    paystack_public_key: str = ""
    paystack_secret_key: str = ""
    paystack_api_url: str = "https://api.paystack.co"
    payments_api_url: str = "http://localhost:8000/api/payments"

    # Usage limits
    free_daily_query_limit: int = 2
    enable_usage_limits: bool = True


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
