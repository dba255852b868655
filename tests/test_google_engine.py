import pytest

from reader_translation.engines import GoogleTranslationEngine, OnlineModelManager
from reader_translation.engines.google_translate import to_google_code
from reader_translation.errors import ModelDownloadError, TranslationEngineError
from reader_translation.models import DownloadConditions


class _MockGoogleTranslator:
    instances = []

    def __init__(self, source=None, target=None):
        self.source = source
        self.target = target
        type(self).instances.append(self)

    def translate(self, text):
        return f"{self.target}:{text}"


class _FailingGoogleTranslator(_MockGoogleTranslator):
    def translate(self, text):
        raise ValueError("Request exception")


class _EmptyGoogleTranslator(_MockGoogleTranslator):
    def translate(self, text):
        return None


@pytest.fixture(autouse=True)
def _reset_instances():
    _MockGoogleTranslator.instances = []
    yield


@pytest.mark.asyncio
async def test_handle_translates_with_google_codes():
    engine = GoogleTranslationEngine(translator_class=_MockGoogleTranslator)
    handle = engine.open("en", "zh")

    assert await handle.translate("Hello") == "zh-CN:Hello"
    assert await handle.translate("World") == "zh-CN:World"
    assert len(_MockGoogleTranslator.instances) == 1
    assert _MockGoogleTranslator.instances[0].source == "en"


@pytest.mark.asyncio
async def test_handle_wraps_failures():
    handle = GoogleTranslationEngine(translator_class=_FailingGoogleTranslator).open("en", "es")

    with pytest.raises(TranslationEngineError):
        await handle.translate("Hello")


@pytest.mark.asyncio
async def test_handle_rejects_empty_result():
    handle = GoogleTranslationEngine(translator_class=_EmptyGoogleTranslator).open("en", "es")

    with pytest.raises(TranslationEngineError):
        await handle.translate("Hello")


@pytest.mark.asyncio
async def test_closed_handle_refuses_calls():
    handle = GoogleTranslationEngine(translator_class=_MockGoogleTranslator).open("en", "es")
    handle.close()

    with pytest.raises(TranslationEngineError):
        await handle.translate("Hello")


def test_default_translator_class_is_deep_translator():
    from deep_translator import GoogleTranslator

    assert GoogleTranslationEngine()._translator_class is GoogleTranslator


@pytest.mark.asyncio
async def test_online_model_manager():
    manager = OnlineModelManager()

    assert await manager.is_downloaded("es") is True
    assert await manager.is_downloaded("auto") is False
    await manager.download("fr", DownloadConditions())
    with pytest.raises(ModelDownloadError):
        await manager.download("xx", DownloadConditions())


def test_to_google_code_maps_chinese():
    assert to_google_code("zh") == "zh-CN"
    assert to_google_code("ZH") == "zh-CN"


def test_to_google_code_passes_other_languages_through():
    assert to_google_code("es") == "es"
    assert to_google_code("ja") == "ja"


def test_package_exports_import():
    import reader_translation
    from reader_translation import engines

    assert reader_translation.__version__
    assert engines.GoogleTranslationEngine is GoogleTranslationEngine
