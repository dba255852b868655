"""
Translation orchestrator.

Keeps one primary translator for the configured language pair, opens a
temporary translator per request when the source is ``auto``, and packs all
fragments of a page into a single marker-numbered request with a concurrent
per-fragment fallback.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from ..engines.base import ModelManager, TranslationEngine, TranslatorHandle
from ..logging_config import get_log_level, setup_module_logger
from ..models import CJK_LANGUAGES, DownloadConditions, LanguageCode, RecognizedBlock

logger = setup_module_logger(
    __name__,
    "translator/translator.log",
    level=get_log_level("TRANSLATOR_LOG_LEVEL", logging.INFO),
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str, source_lang: str) -> str:
    """
    Prepare recognized text for translation.

    CJK scripts do not separate words with spaces, so any whitespace the
    recognizer inserted is dropped; other languages get whitespace runs
    collapsed to a single space.
    """
    if source_lang in CJK_LANGUAGES:
        return _WHITESPACE_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def build_batch_payload(texts: Sequence[str]) -> str:
    """``["a", "b"]`` -> ``"[#0#] a\\n[#1#] b"``."""
    return "\n".join(f"[#{i}#] {text}" for i, text in enumerate(texts))


def parse_batch_response(response: str, count: int) -> Optional[list[str]]:
    """
    Split a batched translation back into ``count`` items.

    Returns ``None`` if any marker is missing from the response.
    """
    items: list[str] = []
    for i in range(count):
        match = re.search(
            rf"\[#{i}#\]\s*(.*?)(?=\s*\[#\d+#\]|\Z)",
            response,
            flags=re.DOTALL,
        )
        if match is None:
            return None
        items.append(match.group(1).strip())
    return items


class TranslationOrchestrator:
    """
    Batch translation over a pluggable translation engine.

    ``translate`` never raises: any engine failure degrades to the
    normalized source text of the affected fragments.
    """

    def __init__(
        self,
        engine: TranslationEngine,
        model_manager: Optional[ModelManager] = None,
        source_lang: str = LanguageCode.AUTO.value,
        target_lang: str = LanguageCode.ES.value,
        require_unmetered: bool = True,
    ):
        self.engine = engine
        self.model_manager = model_manager
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.require_unmetered = require_unmetered
        self._primary: Optional[TranslatorHandle] = None
        self._closed = False
        self.last_metrics: Optional[dict] = None

    @property
    def primary(self) -> Optional[TranslatorHandle]:
        return self._primary

    def update_languages(self, source_lang: str, target_lang: str) -> None:
        """Switch the configured pair; the old primary translator is closed."""
        if (source_lang, target_lang) == (self.source_lang, self.target_lang):
            return
        logger.info(
            "language pair changed: %s->%s => %s->%s",
            self.source_lang,
            self.target_lang,
            source_lang,
            target_lang,
        )
        self._close_primary()
        self.source_lang = source_lang
        self.target_lang = target_lang

    def _close_primary(self) -> None:
        handle, self._primary = self._primary, None
        if handle is None:
            return
        try:
            handle.close()
        except Exception as exc:
            logger.error("Error closing translator %r: %s", handle, exc)

    def _get_primary(self) -> Optional[TranslatorHandle]:
        if self._primary is not None or self._closed:
            return self._primary
        source, target = self.source_lang, self.target_lang
        auto = LanguageCode.AUTO.value
        if source == auto or target == auto or source == target:
            return None
        try:
            self._primary = self.engine.open(source, target)
        except Exception as exc:
            logger.warning("Failed to open translator %s->%s: %s", source, target, exc)
            return None
        logger.debug("primary translator opened: %r", self._primary)
        return self._primary

    @contextmanager
    def _acquire(self, source_lang: str, target_lang: str) -> Iterator[tuple[Optional[TranslatorHandle], bool]]:
        """Yield ``(handle, temporary)``; temporary handles are closed on exit."""
        if self.source_lang != LanguageCode.AUTO.value:
            yield self._get_primary(), False
            return

        try:
            handle = self.engine.open(source_lang, target_lang)
        except Exception as exc:
            logger.warning("Failed to open translator %s->%s: %s", source_lang, target_lang, exc)
            handle = None
        if handle is None:
            yield None, True
            return
        try:
            yield handle, True
        finally:
            try:
                handle.close()
            except Exception as exc:
                logger.error("Error closing temporary translator %r: %s", handle, exc)

    async def _call(self, handle: TranslatorHandle, text: str, metrics: dict) -> str:
        metrics["engine_calls"] += 1
        return await handle.translate(text)

    async def _translate_one(self, handle: TranslatorHandle, text: str, metrics: dict) -> str:
        if not text.strip():
            return ""
        try:
            return await self._call(handle, text, metrics)
        except Exception as exc:
            logger.warning("translate failed, keeping source: %s (%s)", text[:20], exc)
            return text.strip()

    async def _translate_sequential(
        self, handle: TranslatorHandle, texts: Sequence[str], metrics: dict
    ) -> list[str]:
        return list(await asyncio.gather(*(self._translate_one(handle, t, metrics) for t in texts)))

    async def translate(
        self,
        blocks: Sequence[RecognizedBlock],
        source_lang: str,
        target_lang: str,
    ) -> list[str]:
        """Translate recognized blocks; output aligned with ``blocks``."""
        return await self.translate_texts([b.text for b in blocks], source_lang, target_lang)

    async def translate_texts(
        self,
        texts: Sequence[str],
        source_lang: str,
        target_lang: str,
    ) -> list[str]:
        start = time.perf_counter()
        normalized = [normalize_text(t, source_lang) for t in texts]
        metrics = {
            "mode": "skip",
            "items": len(normalized),
            "engine_calls": 0,
            "temporary": False,
            "duration_ms": 0.0,
        }
        self.last_metrics = metrics

        if not normalized or source_lang == target_lang:
            logger.debug("skip translation: items=%d %s->%s", len(normalized), source_lang, target_lang)
            metrics["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
            return normalized

        with self._acquire(source_lang, target_lang) as (handle, temporary):
            metrics["temporary"] = temporary
            if handle is None:
                metrics["mode"] = "untranslated"
                result = normalized
            else:
                result = await self._translate_batch(handle, normalized, metrics)

        metrics["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "translated %d items %s->%s mode=%s calls=%d %.0fms",
            len(normalized),
            source_lang,
            target_lang,
            metrics["mode"],
            metrics["engine_calls"],
            metrics["duration_ms"],
        )
        return result

    async def _translate_batch(
        self, handle: TranslatorHandle, texts: list[str], metrics: dict
    ) -> list[str]:
        payload = build_batch_payload(texts)
        try:
            response = await self._call(handle, payload, metrics)
        except Exception as exc:
            logger.warning("batch translate failed, falling back to per-item: %s", exc)
        else:
            items = parse_batch_response(response, len(texts))
            if items is not None:
                metrics["mode"] = "batch"
                return items
            logger.warning("batch response missing markers, falling back to per-item")
            logger.debug("batch response: %s", response)

        metrics["mode"] = "sequential"
        return await self._translate_sequential(handle, texts, metrics)

    async def is_model_downloaded(self, lang: str) -> bool:
        if self.model_manager is None:
            return False
        try:
            return bool(await self.model_manager.is_downloaded(lang))
        except Exception as exc:
            logger.warning("model status check failed for %s: %s", lang, exc)
            return False

    async def download_model(self, lang: str) -> bool:
        """Request the model for ``lang`` under the configured network policy."""
        if self.model_manager is None:
            logger.warning("no model manager configured, cannot download %s", lang)
            return False
        conditions = DownloadConditions(require_unmetered=self.require_unmetered)
        try:
            await self.model_manager.download(lang, conditions)
        except Exception as exc:
            logger.warning("model download failed for %s: %s", lang, exc)
            return False
        logger.info("model downloaded: %s", lang)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._close_primary()
