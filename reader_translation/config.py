"""
Application settings.

Read-only view of the reader's translation preferences, loaded from the
environment (``READER_TRANSLATION_*``) or a ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LanguageCode

SOURCE_LANGUAGES = frozenset(code.value for code in LanguageCode if code is not LanguageCode.UND)
TARGET_LANGUAGES = SOURCE_LANGUAGES - {LanguageCode.AUTO.value}


class Settings(BaseSettings):
    """Translation settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="READER_TRANSLATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Reader preferences
    translation_enabled: bool = True
    source_language: str = LanguageCode.AUTO.value
    target_language: str = LanguageCode.ES.value
    font_size: float = Field(default=16.0, ge=8, le=30, description="Overlay font size (sp)")

    # Model downloads only on unmetered (wifi) connections
    model_download_unmetered_only: bool = True

    # Offline recognition engine (tests / demos)
    use_mock_engines: bool = False

    @field_validator("source_language")
    @classmethod
    def _check_source(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SOURCE_LANGUAGES:
            raise ValueError(f"unsupported source language: {value}")
        return value

    @field_validator("target_language")
    @classmethod
    def _check_target(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in TARGET_LANGUAGES:
            raise ValueError(f"unsupported target language: {value}")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
