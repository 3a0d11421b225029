"""
Configuration settings for the News Verification API Service.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from newsverify import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "News Verification API"
    app_version: str = __version__
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./newsverify.db"
    # e.g. "REPEATABLE READ" on PostgreSQL so list + count share a snapshot
    database_isolation_level: Optional[str] = None

    # Credentials
    secret_key: str = "change-me-in-production"
    token_algorithm: str = "HS256"
    password_hash_method: str = "scrypt"  # any werkzeug.security method string

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Uploads
    upload_dir: str = "uploads"
    public_base_url: str = "http://localhost:8000"
    max_upload_bytes: int = 5 * 1024 * 1024

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NV_",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
