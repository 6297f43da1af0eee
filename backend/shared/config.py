"""
Centralized configuration for the LinkUni backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SMTP_*, SUPABASE_*).
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
    app_name: str = "LinkUni API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""
    storage_bucket: str = "posts"

    # Tokens (lifetimes in seconds)
    jwt_secret: str = ""
    jwt_algorithm: str = "HS512"
    session_expire_seconds: int = 86400
    activation_expire_seconds: int = 300
    reset_expire_seconds: int = 900

    # Accounts
    valid_domain: str = "example.com"  # placeholder value disables the domain check
    cookie_secure: bool = False

    # URLs used in outgoing mail
    frontend_url: str = "http://localhost:3000"
    api_base_url: str = "http://localhost:8080"

    # Mail
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    mail_from: str = "no-reply@linkuni.app"

    # Posts
    max_upload_bytes: int = 10 * 1024 * 1024
    preview_url_expire_minutes: int = 15


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
