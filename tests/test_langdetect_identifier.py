import pytest
from langdetect.lang_detect_exception import LangDetectException

from reader_translation.engines import LangdetectIdentifier, langid
from reader_translation.errors import LanguageIdentificationError


def test_normalize_language_code():
    assert langid.normalize_language_code("zh-cn") == "zh"
    assert langid.normalize_language_code("zh-TW") == "zh"
    assert langid.normalize_language_code("ES") == "es"
    assert langid.normalize_language_code("") == "und"


@pytest.mark.asyncio
async def test_identify_normalizes_detected_code(monkeypatch):
    monkeypatch.setattr(langid, "detect", lambda text: "zh-cn")

    assert await LangdetectIdentifier().identify("whatever") == "zh"


@pytest.mark.asyncio
async def test_identify_without_features_is_undetermined(monkeypatch):
    def _raise(text):
        raise LangDetectException(0, "No features in text.")

    monkeypatch.setattr(langid, "detect", _raise)

    assert await LangdetectIdentifier().identify("1234") == "und"


@pytest.mark.asyncio
async def test_identify_unexpected_error_raises(monkeypatch):
    def _raise(text):
        raise RuntimeError("profiles missing")

    monkeypatch.setattr(langid, "detect", _raise)

    with pytest.raises(LanguageIdentificationError):
        await LangdetectIdentifier().identify("hola")


@pytest.mark.asyncio
async def test_identify_spanish_sentence():
    code = await LangdetectIdentifier().identify("Hola amigo, esta es una frase en espanol para la prueba")

    assert code == "es"
