"""
Reader page translation core.

Recognizes text on a captured page image with several script-specific
engines, resolves the source language and produces a translated overlay
anchored to the recognized block geometry.
"""

__version__ = "0.1.0"

from .config import Settings, get_settings
from .language import LanguageResolver, classify
from .models import (
    DownloadConditions,
    LanguageCode,
    Rect,
    RecognizedBlock,
    ScriptFamily,
    TranslatedBlock,
    TranslationResult,
)
from .modules import RecognitionCoordinator, TranslationOrchestrator
from .pipeline import OverlayPipeline

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "LanguageResolver",
    "classify",
    "DownloadConditions",
    "LanguageCode",
    "Rect",
    "RecognizedBlock",
    "ScriptFamily",
    "TranslatedBlock",
    "TranslationResult",
    "RecognitionCoordinator",
    "TranslationOrchestrator",
    "OverlayPipeline",
]
