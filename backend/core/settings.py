"""Application configuration loaded from ``WELDTRACK_*`` environment variables."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = Field(default="WeldTrack Bonus API")
    api_prefix: str = Field(default="/api")

    store_backend: Literal["memory", "json", "remote"] = Field(default="json")
    data_dir: Path = Field(default_factory=lambda: Path.cwd() / "data")

    remote_url: Optional[str] = Field(default=None)
    remote_api_key: Optional[str] = Field(default=None)
    remote_table: str = Field(default="weldtrack_records")
    remote_timeout: float = Field(default=15.0)

    catalog_path: Optional[str] = Field(default=None)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])
    notification_interval: float = Field(default=5.0, gt=0)
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_prefix": "WELDTRACK_",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]
