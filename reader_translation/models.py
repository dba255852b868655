"""
Core Data Models for the Reader Translation System.

Defines the standard data structures shared by all components:
- Rect: Axis-aligned rectangle in image pixel coordinates
- RecognizedBlock: Single text block produced by a recognition engine
- RecognitionOutcome: All blocks from one engine invocation (arbitration only)
- TranslatedBlock / TranslationResult: Terminal overlay artifact
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field


class LanguageCode(str, Enum):
    """Language codes understood by the translation core."""
    AUTO = "auto"
    EN = "en"
    ES = "es"
    JA = "ja"
    KO = "ko"
    ZH = "zh"
    FR = "fr"
    DE = "de"
    PT = "pt"
    IT = "it"
    UND = "und"


CJK_LANGUAGES = frozenset({LanguageCode.JA.value, LanguageCode.KO.value, LanguageCode.ZH.value})


class ScriptFamily(str, Enum):
    """Recognition engine families, in registration (tie-break) order."""
    LATIN = "latin"
    CHINESE = "chinese"
    JAPANESE = "japanese"
    KOREAN = "korean"


SCRIPT_FAMILY_ORDER: tuple[ScriptFamily, ...] = (
    ScriptFamily.LATIN,
    ScriptFamily.CHINESE,
    ScriptFamily.JAPANESE,
    ScriptFamily.KOREAN,
)


class Rect(BaseModel):
    """2D bounding rectangle (origin + size)."""
    model_config = ConfigDict(frozen=True)

    x: int = Field(..., description="Left coordinate")
    y: int = Field(..., description="Top coordinate")
    width: int = Field(..., ge=0, description="Width in pixels")
    height: int = Field(..., ge=0, description="Height in pixels")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "Rect":
        """Bounding rectangle of a polygon given as (x, y) points."""
        pts = [(float(p[0]), float(p[1])) for p in points]
        if not pts:
            raise ValueError("at least one point is required")
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        x1, y1 = int(min(xs)), int(min(ys))
        return cls(x=x1, y=y1, width=int(max(xs)) - x1, height=int(max(ys)) - y1)


class RecognizedBlock(BaseModel):
    """
    Single recognized text block.

    Produced by a recognition engine and never modified afterwards.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "text": "Hello World",
                "bounding_box": {"x": 100, "y": 50, "width": 200, "height": 100},
            }
        },
    )

    text: str = Field(..., description="Recognized text")
    bounding_box: Rect = Field(..., description="Block geometry")


class RecognitionOutcome(BaseModel):
    """Blocks returned by one engine invocation, plus the engine identity."""
    model_config = ConfigDict(frozen=True)

    engine: str = Field(..., description="Script family of the producing engine")
    blocks: tuple[RecognizedBlock, ...] = Field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.blocks)


class TranslatedBlock(BaseModel):
    """Translated text anchored to the source block geometry."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Translated text")
    rect: Rect = Field(..., description="Geometry inherited from the recognized block")


class TranslationResult(BaseModel):
    """Terminal artifact handed to the rendering layer."""
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "blocks": [
                    {"text": "Hola", "rect": {"x": 10, "y": 10, "width": 80, "height": 20}},
                ],
                "source_lang": "en",
                "target_lang": "es",
            }
        },
    )

    blocks: tuple[TranslatedBlock, ...] = Field(default_factory=tuple)
    source_lang: str = Field(..., description="Resolved source language")
    target_lang: str = Field(..., description="Target language")


class DownloadConditions(BaseModel):
    """Network policy for translation model downloads."""
    model_config = ConfigDict(frozen=True)

    require_unmetered: bool = Field(default=True, description="Only download on unmetered networks")
