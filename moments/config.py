from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # General
    log_level: str = Field("INFO", description="Root log level, e.g. DEBUG or INFO.")

    # Object storage (Aliyun OSS compatible)
    oss_access_key_id: str = Field(...)
    oss_access_key_secret: SecretStr = Field(...)
    oss_bucket: str = Field(...)
    oss_endpoint: str = Field(..., description="Bucket origin, e.g. https://bucket.oss-cn-hangzhou.aliyuncs.com")
    oss_upload_dir: str = Field("moments", description="Key prefix for uploaded images.")
    oss_timeout: float = Field(30.0, description="Upload timeout in seconds.")

    # Journal backend
    moments_api_base_url: str = Field("http://localhost:1234")
    moments_api_token: Optional[SecretStr] = Field(default=None)

    # Image processing
    image_backend: str = Field("pillow")
    image_max_width: int = Field(1920, ge=1, description="Maximum width for uploaded images (pixels).")
    image_max_bytes: int = Field(1_500_000, ge=1, description="Byte budget for an uploaded image.")
    image_initial_quality: float = Field(0.7, gt=0, le=1)
    image_min_quality: float = Field(0.3, gt=0, le=1)
    image_max_count: int = Field(9, ge=1, description="Maximum images attached to one thought.")

    # Blur hash
    blurhash_components_x: int = Field(4, ge=1, le=9)
    blurhash_components_y: int = Field(3, ge=1, le=9)
    blurhash_sample_size: int = Field(32, ge=1)


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""

    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
