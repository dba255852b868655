"""Language identification backed by langdetect."""

from __future__ import annotations

import asyncio
import logging

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from ..errors import LanguageIdentificationError
from .base import LanguageIdentifier

logger = logging.getLogger(__name__)

# Deterministic results across runs
DetectorFactory.seed = 0


def normalize_language_code(code: str) -> str:
    """``zh-cn`` / ``zh-TW`` -> ``zh``; other codes lower-cased."""
    code = (code or "").strip().lower()
    if not code:
        return LanguageIdentifier.UNDETERMINED
    return code.split("-", 1)[0]


class LangdetectIdentifier(LanguageIdentifier):
    """Identifies the language of a text sample with langdetect."""

    async def identify(self, text: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._identify_sync, text)

    def _identify_sync(self, text: str) -> str:
        try:
            code = detect(text)
        except LangDetectException as exc:
            # No usable features in the sample (digits, symbols, ...)
            logger.debug("langdetect undetermined: %s", exc)
            return self.UNDETERMINED
        except Exception as exc:
            raise LanguageIdentificationError(f"langdetect failed: {exc}") from exc
        return normalize_language_code(code)
