"""Runtime configuration, read from ``STOREFRONT_*`` environment variables
(or a ``.env`` file in the working directory)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Path("data")
    upload_dir: Path = Path("uploads/products")

    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = Field(default=48, gt=0)

    # Budget for one create-order request; None disables it.
    order_deadline_seconds: float | None = Field(default=5.0, gt=0)
    max_image_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
