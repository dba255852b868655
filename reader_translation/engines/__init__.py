"""External engine contracts and their concrete adapters."""

from .base import LanguageIdentifier, ModelManager, RecognitionEngine, TranslationEngine, TranslatorHandle
from .google_translate import GoogleTranslationEngine, GoogleTranslatorHandle, OnlineModelManager
from .langid import LangdetectIdentifier
from .paddle_engine import MockRecognitionEngine, PaddleRecognitionEngine

__all__ = [
    "RecognitionEngine",
    "LanguageIdentifier",
    "TranslationEngine",
    "TranslatorHandle",
    "ModelManager",
    "PaddleRecognitionEngine",
    "MockRecognitionEngine",
    "LangdetectIdentifier",
    "GoogleTranslationEngine",
    "GoogleTranslatorHandle",
    "OnlineModelManager",
]
