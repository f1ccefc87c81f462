"""
Application Settings.

All configuration comes from .env / environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # --- Result cache ---
    cache_enabled: bool = True
    cache_size: int = 50

    # --- OCR ---
    ocr_lang: str = "ch"
    ocr_use_gpu: bool = False

    # --- Pre-enhancement ---
    max_image_dimension: int = 1000
    enhance_brightness: int = 10
    enhance_contrast: int = 20
    enhance_sharpen: bool = True

    # --- Rules ---
    id_checksum_strict: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Settings singleton."""
    return Settings()
