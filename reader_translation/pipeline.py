"""
Overlay Pipeline - turns a captured page image into a translated overlay.

Flow: decode → recognize (fan-out) → resolve source language → translate
(batched) → zip translations onto block geometry.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import Settings, get_settings
from .engines import (
    GoogleTranslationEngine,
    LangdetectIdentifier,
    MockRecognitionEngine,
    OnlineModelManager,
    PaddleRecognitionEngine,
)
from .engines.base import LanguageIdentifier, ModelManager, TranslationEngine
from .image_io import ImageInput, load_image
from .language import LanguageResolver
from .metrics import PipelineMetrics, Timer
from .models import SCRIPT_FAMILY_ORDER, LanguageCode, TranslatedBlock, TranslationResult
from .modules import RecognitionCoordinator, TranslationOrchestrator

logger = logging.getLogger(__name__)


class OverlayPipeline:
    """
    Translation overlay pipeline.

    Owns the coordinator, resolver and orchestrator and closes them together.
    """

    def __init__(
        self,
        coordinator: RecognitionCoordinator,
        resolver: LanguageResolver,
        orchestrator: TranslationOrchestrator,
        settings: Optional[Settings] = None,
    ):
        self.coordinator = coordinator
        self.resolver = resolver
        self.orchestrator = orchestrator
        self.settings = settings or get_settings()
        self.last_metrics: Optional[dict] = None
        self._closed = False
        self.apply_settings(self.settings)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        translation_engine: Optional[TranslationEngine] = None,
        identifier: Optional[LanguageIdentifier] = None,
        model_manager: Optional[ModelManager] = None,
    ) -> "OverlayPipeline":
        """Build the default engine set (PaddleOCR or mock, langdetect, Google)."""
        settings = settings or get_settings()
        if settings.use_mock_engines:
            engines = {family: MockRecognitionEngine(family) for family in SCRIPT_FAMILY_ORDER}
        else:
            engines = {family: PaddleRecognitionEngine(family) for family in SCRIPT_FAMILY_ORDER}

        orchestrator = TranslationOrchestrator(
            translation_engine or GoogleTranslationEngine(),
            model_manager=model_manager or OnlineModelManager(),
            source_lang=settings.source_language,
            target_lang=settings.target_language,
            require_unmetered=settings.model_download_unmetered_only,
        )
        return cls(
            RecognitionCoordinator(engines),
            LanguageResolver(identifier or LangdetectIdentifier()),
            orchestrator,
            settings=settings,
        )

    def apply_settings(self, settings: Settings) -> None:
        """Adopt new reader preferences; a changed language pair resets the primary translator."""
        self.settings = settings
        self.orchestrator.require_unmetered = settings.model_download_unmetered_only
        self.orchestrator.update_languages(settings.source_language, settings.target_language)

    async def process(self, image: ImageInput) -> Optional[TranslationResult]:
        """
        Produce the translated overlay for one page image.

        Returns ``None`` when translation is disabled or no text was found.
        """
        settings = self.settings
        if not settings.translation_enabled:
            logger.debug("translation disabled, skipping page")
            return None

        configured_source = settings.source_language
        target = settings.target_language
        metrics = PipelineMetrics()

        with Timer() as total:
            try:
                result = await self._run(image, configured_source, target, metrics)
            finally:
                metrics.total_duration_ms = total.elapsed_ms()
                self.last_metrics = metrics.to_dict()

        logger.debug(metrics.summary())
        if result is not None:
            logger.info(
                "page translated: %d blocks %s->%s %.0fms",
                len(result.blocks),
                result.source_lang,
                target,
                metrics.total_duration_ms,
            )
        return result

    async def _run(
        self,
        image: ImageInput,
        configured_source: str,
        target: str,
        metrics: PipelineMetrics,
    ) -> Optional[TranslationResult]:
        rgb = load_image(image)

        with metrics.stage("recognize") as stage:
            blocks = await self.coordinator.recognize(rgb, configured_source)
            stage.items_processed = len(blocks or [])
            stage.sub_metrics.update(self.coordinator.last_metrics or {})
        if blocks is None:
            logger.info("no text found on page (%dx%d)", *rgb.size)
            return None

        with metrics.stage("resolve") as stage:
            source = configured_source
            if configured_source == LanguageCode.AUTO.value:
                source = await self.resolver.resolve("\n".join(b.text for b in blocks))
            stage.items_processed = 1
            stage.sub_metrics["source_lang"] = source

        with metrics.stage("translate") as stage:
            translations = await self.orchestrator.translate(blocks, source, target)
            stage.items_processed = len(translations)
            stage.sub_metrics.update(self.orchestrator.last_metrics or {})

        return TranslationResult(
            blocks=tuple(
                TranslatedBlock(text=text, rect=block.bounding_box)
                for block, text in zip(blocks, translations)
            ),
            source_lang=source,
            target_lang=target,
        )

    async def is_model_downloaded(self, lang: str) -> bool:
        return await self.orchestrator.is_model_downloaded(lang)

    async def download_model(self, lang: str) -> bool:
        return await self.orchestrator.download_model(lang)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.coordinator.close()
        self.resolver.close()
        self.orchestrator.close()

    def __enter__(self) -> "OverlayPipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
