"""
Recognition fan-out coordinator.

Sends one image to the recognition engines selected for a source hint,
waits for every engine to settle, drops outputs without usable text and
keeps the single longest result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Mapping, Optional, Sequence

from ..engines.base import RecognitionEngine
from ..language.script_classifier import is_cjk_char
from ..models import LanguageCode, RecognitionOutcome, RecognizedBlock, ScriptFamily

logger = logging.getLogger(__name__)

# Source hint -> the only engine worth running
HINT_FAMILIES = {
    LanguageCode.ZH.value: ScriptFamily.CHINESE,
    LanguageCode.JA.value: ScriptFamily.JAPANESE,
    LanguageCode.KO.value: ScriptFamily.KOREAN,
    LanguageCode.EN.value: ScriptFamily.LATIN,
    LanguageCode.ES.value: ScriptFamily.LATIN,
}


def _has_usable_char(text: str) -> bool:
    return any(ch.isalpha() or ch.isdigit() or is_cjk_char(ch) for ch in text.strip())


def is_usable_output(blocks: Sequence[RecognizedBlock]) -> bool:
    """An engine output counts only if some block holds a letter, digit or CJK char."""
    return any(_has_usable_char(block.text) for block in blocks)


def pick_best(outcomes: Sequence[RecognitionOutcome]) -> Optional[RecognitionOutcome]:
    """Longest concatenated text wins; earlier outcomes win ties."""
    best: Optional[RecognitionOutcome] = None
    for outcome in outcomes:
        if best is None or len(outcome.text) > len(best.text):
            best = outcome
    return best


class RecognitionCoordinator:
    """Runs script-specific recognition engines concurrently and arbitrates."""

    def __init__(self, engines: Mapping[ScriptFamily, RecognitionEngine]):
        # Insertion order is the tie-break order
        self.engines: dict[ScriptFamily, RecognitionEngine] = dict(engines)
        self.last_metrics: Optional[dict] = None
        self._closed = False

    def select_engines(self, source_hint: str) -> list[ScriptFamily]:
        hint = (source_hint or "").strip().lower()
        family = HINT_FAMILIES.get(hint)
        if family is None:
            return list(self.engines)
        if family not in self.engines:
            logger.warning("No %s recognition engine registered for hint %s", family.value, hint)
            return []
        return [family]

    async def _run_engine(self, family: ScriptFamily, image: Any) -> Optional[list[RecognizedBlock]]:
        engine = self.engines[family]
        try:
            return list(await engine.process(image))
        except Exception as exc:
            logger.warning("Recognition engine %s failed: %s", family.value, exc)
            return None

    async def recognize(
        self, image: Any, source_hint: str = LanguageCode.AUTO.value
    ) -> Optional[list[RecognizedBlock]]:
        """
        Recognize text in ``image``.

        Returns the blocks of the best engine, or ``None`` when no engine
        produced usable text.
        """
        start = time.perf_counter()
        families = self.select_engines(source_hint)
        metrics = {
            "engines_selected": [f.value for f in families],
            "engines_failed": [],
            "engines_discarded": [],
            "winner": None,
            "blocks": 0,
            "duration_ms": 0.0,
        }
        self.last_metrics = metrics
        if not families:
            return None

        results = await asyncio.gather(*(self._run_engine(f, image) for f in families))

        outcomes: list[RecognitionOutcome] = []
        for family, blocks in zip(families, results):
            if blocks is None:
                metrics["engines_failed"].append(family.value)
                continue
            if not is_usable_output(blocks):
                logger.debug("Discarding %s output without usable text", family.value)
                metrics["engines_discarded"].append(family.value)
                continue
            outcomes.append(RecognitionOutcome(engine=family.value, blocks=tuple(blocks)))

        best = pick_best(outcomes)
        metrics["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
        if best is None:
            logger.info("No text recognized (hint=%s, engines=%s)", source_hint, metrics["engines_selected"])
            return None

        metrics["winner"] = best.engine
        metrics["blocks"] = len(best.blocks)
        logger.info(
            "Recognition done: winner=%s blocks=%d %.0fms",
            best.engine,
            len(best.blocks),
            metrics["duration_ms"],
        )
        return list(best.blocks)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for family, engine in self.engines.items():
            try:
                engine.close()
            except Exception as exc:
                logger.error("Error closing %s recognition engine: %s", family.value, exc)
