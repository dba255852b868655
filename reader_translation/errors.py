"""Engine-level exceptions raised by collaborator adapters."""

from __future__ import annotations


class EngineError(Exception):
    """Base exception with machine-readable code for engine failures."""

    def __init__(self, message: str, *, error_code: str):
        super().__init__(message)
        self.error_code = error_code


class RecognitionEngineError(EngineError):
    """Raised when a recognition engine cannot process an image."""

    def __init__(self, message: str = "Recognition engine failed"):
        super().__init__(message, error_code="recognition_failed")


class LanguageIdentificationError(EngineError):
    """Raised when the language identification service fails."""

    def __init__(self, message: str = "Language identification failed"):
        super().__init__(message, error_code="language_id_failed")


class TranslationEngineError(EngineError):
    """Raised when a translator cannot be opened or a translate call fails."""

    def __init__(self, message: str = "Translation engine failed"):
        super().__init__(message, error_code="translation_failed")


class ModelDownloadError(EngineError):
    """Raised when a translation model cannot be downloaded."""

    def __init__(self, message: str = "Model download failed"):
        super().__init__(message, error_code="model_download_failed")
