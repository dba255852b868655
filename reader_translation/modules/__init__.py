"""Orchestration components of the translation core."""

from .recognition import RecognitionCoordinator
from .translator import TranslationOrchestrator

__all__ = [
    "RecognitionCoordinator",
    "TranslationOrchestrator",
]
