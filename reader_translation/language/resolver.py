"""
Language resolution: heuristic first, external identification only for
ambiguous Latin-script text.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..engines.base import LanguageIdentifier
from ..models import LanguageCode
from .script_classifier import classify, contains_latin

logger = logging.getLogger(__name__)


class LanguageResolver:
    """
    Resolves the source language of recognized text.

    The external identifier is only consulted when the heuristic falls back
    to English for text that actually contains Latin letters (an accent-free
    Spanish or French sample looks English to the regex signatures).
    """

    def __init__(self, identifier: Optional[LanguageIdentifier] = None):
        self.identifier = identifier
        self._closed = False

    async def resolve(self, text: str) -> str:
        heuristic = classify(text)
        if heuristic != LanguageCode.EN.value or not contains_latin(text):
            return heuristic
        if self.identifier is None:
            return heuristic

        try:
            code = await self.identifier.identify(text)
        except Exception as exc:
            logger.warning("language identification failed, using %s: %s", heuristic, exc)
            return heuristic

        code = (code or "").strip()
        if not code or code == LanguageIdentifier.UNDETERMINED:
            logger.debug("language identification undetermined, using %s", heuristic)
            return heuristic
        return code

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.identifier is None:
            return
        try:
            self.identifier.close()
        except Exception as exc:
            logger.error("Error closing language identifier: %s", exc)
