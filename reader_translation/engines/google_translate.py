"""Google Translate backed translation engine (via deep-translator)."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..errors import ModelDownloadError, TranslationEngineError
from ..models import DownloadConditions, LanguageCode
from .base import ModelManager, TranslationEngine, TranslatorHandle

logger = logging.getLogger(__name__)

# Internal code -> Google Translate code
GOOGLE_CODES = {
    LanguageCode.ZH.value: "zh-CN",
}

SUPPORTED_LANGUAGES = frozenset(
    code.value
    for code in LanguageCode
    if code not in (LanguageCode.AUTO, LanguageCode.UND)
)


def to_google_code(lang: str) -> str:
    lang = (lang or "").strip().lower()
    return GOOGLE_CODES.get(lang, lang)


class GoogleTranslatorHandle(TranslatorHandle):
    """A deep-translator ``GoogleTranslator`` bound to one language pair."""

    def __init__(self, source_lang: str, target_lang: str, translator_class):
        super().__init__(source_lang, target_lang)
        self._translator_class = translator_class
        self._translator = None
        self.closed = False

    def _get_translator(self):
        if self._translator is None:
            self._translator = self._translator_class(
                source=to_google_code(self.source_lang),
                target=to_google_code(self.target_lang),
            )
        return self._translator

    async def translate(self, text: str) -> str:
        if self.closed:
            raise TranslationEngineError(f"{self!r} is closed")
        loop = asyncio.get_running_loop()
        try:
            translator = self._get_translator()
            result = await loop.run_in_executor(None, translator.translate, text)
        except TranslationEngineError:
            raise
        except Exception as exc:
            raise TranslationEngineError(
                f"Google translate {self.source_lang}->{self.target_lang} failed: {exc}"
            ) from exc
        if result is None:
            raise TranslationEngineError("Google translate returned no text")
        return str(result)

    def close(self) -> None:
        self._translator = None
        self.closed = True


class GoogleTranslationEngine(TranslationEngine):
    """
    Opens Google Translate handles.

    ``translator_class`` defaults to ``deep_translator.GoogleTranslator``;
    any class taking ``source=``/``target=`` keywords and exposing
    ``translate(text)`` works.
    """

    def __init__(self, translator_class=None):
        if translator_class is None:
            from deep_translator import GoogleTranslator

            translator_class = GoogleTranslator
        self._translator_class = translator_class

    def open(self, source_lang: str, target_lang: str) -> GoogleTranslatorHandle:
        logger.debug("opening Google translator %s->%s", source_lang, target_lang)
        return GoogleTranslatorHandle(source_lang, target_lang, self._translator_class)


class OnlineModelManager(ModelManager):
    """
    Model manager for an online translation service.

    There is nothing to fetch: every supported language counts as available
    and downloads complete immediately. Unsupported codes are rejected.
    """

    def __init__(self, supported: Optional[frozenset] = None):
        self.supported = supported if supported is not None else SUPPORTED_LANGUAGES

    async def is_downloaded(self, lang: str) -> bool:
        return (lang or "").strip().lower() in self.supported

    async def download(self, lang: str, conditions: DownloadConditions) -> None:
        code = (lang or "").strip().lower()
        if code not in self.supported:
            raise ModelDownloadError(f"No translation model for language: {lang!r}")
        logger.info(
            "model for %s available (online, unmetered_only=%s)",
            code,
            conditions.require_unmetered,
        )
