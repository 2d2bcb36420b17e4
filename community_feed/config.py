"""
Runtime configuration helpers for the community feed.

Loads DATABASE_URL, storage credentials and token settings from the .env file
located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required field, must come from .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Community Feed", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    # Access tokens issued by the hosted auth service
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str | None = Field(default=None, alias="JWT_AUDIENCE")

    # S3-compatible object storage
    storage_region: str | None = Field(default=None, alias="STORAGE_REGION")
    storage_endpoint: str | None = Field(default=None, alias="STORAGE_ENDPOINT")
    storage_public_url: str | None = Field(default=None, alias="STORAGE_PUBLIC_URL")
    post_attachments_bucket: str = Field(default="post-attachments", alias="POST_ATTACHMENTS_BUCKET")
    avatars_bucket: str = Field(default="avatars", alias="AVATARS_BUCKET")

    # Non-owner comment edits/deletes match zero rows instead of raising
    silent_ownership_failures: bool = Field(default=False, alias="SILENT_OWNERSHIP_FAILURES")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
