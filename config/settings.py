#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings

from .constants import (
    DEFAULT_PLATFORM,
    DEFAULT_FORMAT,
    DEFAULT_DETAIL_LEVEL,
    DEFAULT_STORAGE_BACKEND,
    PARSER_MAX_PROMPT_LENGTH,
    ENHANCEMENT_TIMEOUT_SECONDS,
    BATCH_MAX_CONCURRENCY,
    API_HOST,
    API_PORT,
    OUTPUT_DIR,
    INPUT_DIR,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Pipeline Defaults ==========
    default_platform: str = DEFAULT_PLATFORM
    default_format: str = DEFAULT_FORMAT
    default_detail_level: str = DEFAULT_DETAIL_LEVEL
    max_prompt_length: int = PARSER_MAX_PROMPT_LENGTH
    strict_validation: bool = False

    # ========== Enhancement ==========
    use_enhancement: bool = True
    enhancement_provider: str = "keyword"  # keyword | gemini | openai | none
    enhancement_model: Optional[str] = None
    enhancement_timeout: float = ENHANCEMENT_TIMEOUT_SECONDS

    # ========== API Keys ==========
    gemini_api_key: str = ""
    openai_api_key: str = ""

    # ========== Storage ==========
    storage_backend: str = DEFAULT_STORAGE_BACKEND  # memory | local
    output_dir: Path = BASE_DIR / OUTPUT_DIR
    input_dir: Path = BASE_DIR / INPUT_DIR

    # ========== Batch ==========
    batch_concurrency: int = BATCH_MAX_CONCURRENCY

    # ========== Server ==========
    host: str = API_HOST
    port: int = API_PORT
    debug: bool = False

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def get_api_key(self) -> Optional[str]:
        """API key of the configured enhancement provider (None when unset or not needed)"""
        if self.enhancement_provider == "gemini":
            return self.gemini_api_key or None
        elif self.enhancement_provider == "openai":
            return self.openai_api_key or None
        return None

    def summary(self) -> dict:
        """Configuration summary safe for logging (no secrets)"""
        return {
            "default_platform": self.default_platform,
            "default_format": self.default_format,
            "use_enhancement": self.use_enhancement,
            "enhancement_provider": self.enhancement_provider,
            "storage_backend": self.storage_backend,
            "batch_concurrency": self.batch_concurrency,
            "debug": self.debug,
        }


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, applying explicit overrides."""
    return Settings(**overrides)
