"""Base interfaces for the external engines the core orchestrates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import DownloadConditions, RecognizedBlock


class RecognitionEngine(ABC):
    """Abstract text recognition engine (one per script family)."""

    @abstractmethod
    async def process(self, image: Any) -> list[RecognizedBlock]:
        """Recognize text blocks in an RGB image; raise on failure."""
        raise NotImplementedError

    def close(self) -> None:
        """Release engine resources."""


class LanguageIdentifier(ABC):
    """Abstract language identification service."""

    UNDETERMINED = "und"

    @abstractmethod
    async def identify(self, text: str) -> str:
        """Return a language code, or ``UNDETERMINED``; raise on failure."""
        raise NotImplementedError

    def close(self) -> None:
        """Release service resources."""


class TranslatorHandle(ABC):
    """Translator bound to one (source, target) language pair."""

    def __init__(self, source_lang: str, target_lang: str):
        self.source_lang = source_lang
        self.target_lang = target_lang

    @abstractmethod
    async def translate(self, text: str) -> str:
        """Translate ``text``; raise on failure."""
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying translator."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.source_lang}->{self.target_lang}>"


class TranslationEngine(ABC):
    """Factory of translator handles."""

    @abstractmethod
    def open(self, source_lang: str, target_lang: str) -> TranslatorHandle:
        """
        Open a handle for the language pair.

        Implementations may start on-demand model acquisition here; the
        returned handle must be usable (calls may fail until the model is
        available).
        """
        raise NotImplementedError


class ModelManager(ABC):
    """Translation model availability and downloads."""

    @abstractmethod
    async def is_downloaded(self, lang: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def download(self, lang: str, conditions: DownloadConditions) -> None:
        """
        Download the model for ``lang``.

        Must not start a download the conditions forbid; raises
        ``ModelDownloadError`` on refusal or failure.
        """
        raise NotImplementedError
