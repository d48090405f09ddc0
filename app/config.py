from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration sourced from FLATSTORE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLATSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 3000
    data_dir: Path = Path("data")
    log_level: str = "INFO"


@lru_cache
def load_settings() -> Settings:
    """Provide a reusable settings singleton."""

    return Settings()
