"""PaddleOCR recognition engines (one per script family) and an offline mock."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

import numpy as np
from PIL import Image

from ..errors import RecognitionEngineError
from ..image_io import to_bgr_array
from ..models import Rect, RecognizedBlock, ScriptFamily
from .base import RecognitionEngine
from .cache import get_cached_ocr, release_cached_ocr

logger = logging.getLogger(__name__)

PADDLE_LANGS = {
    ScriptFamily.LATIN: "latin",
    ScriptFamily.CHINESE: "ch",
    ScriptFamily.JAPANESE: "japan",
    ScriptFamily.KOREAN: "korean",
}


def _coerce_score(score) -> Optional[float]:
    if score is None:
        return None
    if isinstance(score, (list, tuple, np.ndarray)):
        if len(score) == 0:
            return None
        score = score[0]
    try:
        return float(score)
    except (TypeError, ValueError):
        return None


def _rect_from_any(box) -> Optional[Rect]:
    """Build a Rect from ``[x1, y1, x2, y2]`` or a list of points."""
    if box is None:
        return None

    arr = np.asarray(box, dtype=float)
    if arr.ndim == 1 and arr.size >= 4:
        x1, y1, x2, y2 = (int(v) for v in arr[:4])
        return Rect(x=x1, y=y1, width=max(0, x2 - x1), height=max(0, y2 - y1))

    if arr.ndim >= 2 and arr.shape[0] >= 2 and arr.shape[1] >= 2:
        return Rect.from_points(arr[:, :2].tolist())

    return None


def parse_ocr_output(result: Any, min_score: float = 0.5) -> list[RecognizedBlock]:
    """
    Convert PaddleOCR output into recognized blocks.

    Handles both the ``predict()`` dict layout (``rec_texts`` / ``rec_scores``
    / ``rec_boxes`` or ``rec_polys``) and the legacy ``[points, (text, score)]``
    layout.
    """
    blocks: list[RecognizedBlock] = []
    if not result:
        return blocks

    def add_block(text, score, box_any):
        if not text or not str(text).strip():
            return
        score_value = _coerce_score(score)
        if score_value is None or score_value < min_score:
            return
        rect = _rect_from_any(box_any)
        if rect is None:
            return
        blocks.append(RecognizedBlock(text=str(text).strip(), bounding_box=rect))

    # Legacy output may be wrapped in a single-page list.
    if (
        isinstance(result, (list, tuple))
        and len(result) == 1
        and isinstance(result[0], (list, tuple))
        and result[0]
        and isinstance(result[0][0], (list, tuple))
        and len(result[0][0]) == 2
        and isinstance(result[0][0][0], (list, tuple))
    ):
        result = result[0]

    for item in result:
        if hasattr(item, "get"):
            rec_texts = item.get("rec_texts", None)
            rec_scores = item.get("rec_scores", None)
            if rec_texts is None or rec_scores is None:
                continue
            rec_boxes = item.get("rec_boxes", None)
            rec_polys = item.get("rec_polys", None)
            if rec_polys is None:
                rec_polys = item.get("dt_polys", None)
            for i, (text, score) in enumerate(zip(rec_texts, rec_scores)):
                box_any = None
                if rec_boxes is not None and i < len(rec_boxes):
                    box_any = rec_boxes[i]
                elif rec_polys is not None and i < len(rec_polys):
                    box_any = rec_polys[i]
                add_block(text, score, box_any)
        elif isinstance(item, (list, tuple)) and len(item) >= 2:
            points, text_score = item[0], item[1]
            if isinstance(text_score, (list, tuple)) and len(text_score) >= 2:
                add_block(text_score[0], text_score[1], points)

    return blocks


class PaddleRecognitionEngine(RecognitionEngine):
    """
    Recognition engine backed by PaddleOCR.

    Each script family maps to its own PaddleOCR language model; instances
    are loaded lazily and shared per process.
    """

    def __init__(self, family: ScriptFamily, min_score: float = 0.5):
        self.family = family
        self.lang = PADDLE_LANGS[family]
        self.min_score = min_score
        self._ocr = None

    def _init_ocr(self):
        if self._ocr is None:
            self._ocr = get_cached_ocr(self.lang)
        return self._ocr

    async def process(self, image: Image.Image) -> list[RecognizedBlock]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._process_sync, image)

    def _process_sync(self, image: Image.Image) -> list[RecognizedBlock]:
        try:
            ocr = self._init_ocr()
        except Exception as exc:
            raise RecognitionEngineError(f"PaddleOCR ({self.lang}) unavailable: {exc}") from exc
        array = to_bgr_array(image)

        predict_error: Optional[Exception] = None
        try:
            blocks = parse_ocr_output(ocr.predict(array), min_score=self.min_score)
        except Exception as exc:
            predict_error = exc
            blocks = []
        if blocks:
            return blocks

        try:
            legacy = ocr.ocr(array, det=True, rec=True, cls=False)
        except Exception as exc:
            if predict_error is not None:
                raise RecognitionEngineError(
                    f"PaddleOCR ({self.lang}) failed: {predict_error}"
                ) from predict_error
            logger.debug("legacy PaddleOCR call unavailable (%s): %s", self.lang, exc)
            return []
        return parse_ocr_output(legacy, min_score=self.min_score)

    def close(self) -> None:
        if self._ocr is not None:
            release_cached_ocr(self.lang)
            self._ocr = None

    def __repr__(self) -> str:
        return f"<PaddleRecognitionEngine {self.family.value}>"


class MockRecognitionEngine(RecognitionEngine):
    """Deterministic engine for environments without PaddleOCR."""

    MOCK_TEXTS = {
        ScriptFamily.LATIN: ("Hello!", "What's going on?"),
        ScriptFamily.CHINESE: ("你好",),
        ScriptFamily.JAPANESE: ("こんにちは",),
        ScriptFamily.KOREAN: ("안녕하세요",),
    }

    def __init__(
        self,
        family: ScriptFamily = ScriptFamily.LATIN,
        texts: Optional[Sequence[str]] = None,
    ):
        self.family = family
        self.texts = tuple(texts) if texts is not None else self.MOCK_TEXTS[family]
        self.calls = 0
        self.closed = False

    async def process(self, image: Any) -> list[RecognizedBlock]:
        self.calls += 1
        width, height = getattr(image, "size", (100, 100))
        row = max(1, int(height * 0.15))
        blocks = []
        for i, text in enumerate(self.texts):
            blocks.append(
                RecognizedBlock(
                    text=text,
                    bounding_box=Rect(
                        x=int(width * 0.2),
                        y=int(height * 0.2) + i * row,
                        width=int(width * 0.6),
                        height=row,
                    ),
                )
            )
        return blocks

    def close(self) -> None:
        self.closed = True
