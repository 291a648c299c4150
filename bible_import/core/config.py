"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BIBLE_IMPORT_LOG_LEVEL: str = Field(default="info")
    BIBLE_IMPORT_LOG_DIR: Path | None = Field(default=None)
    BIBLE_IMPORT_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")

    DATA_DIR: Path = Field(default=Path("data"))
    DOWNLOADS_DIR: Path = Field(default=Path("downloads"))
    SOURCES_DIR: Path = Field(default=Path("sources"))
    OUTPUT_DIR: Path = Field(default=Path("output"))

    DEFAULT_VERSION: str = Field(default="KJV")
    CANON_MODE: Literal["protestant66", "catholic73"] = Field(default="protestant66")

    # Files are parsed sequentially unless raised above 1
    PARSE_MAX_WORKERS: int = Field(default=1, ge=1)
    PROGRESS_LOG_EVERY: int = Field(default=1000, ge=1)
    DOWNLOAD_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)


settings = Settings()
config = settings


__all__ = ["Settings", "settings", "config"]
