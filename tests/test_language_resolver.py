import pytest

from reader_translation.engines.base import LanguageIdentifier
from reader_translation.language import LanguageResolver


class _FakeIdentifier(LanguageIdentifier):
    def __init__(self, result="es", error=None):
        self.result = result
        self.error = error
        self.calls = []
        self.close_calls = 0

    async def identify(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result

    def close(self):
        self.close_calls += 1


@pytest.mark.asyncio
async def test_unaccented_latin_text_uses_identifier_once():
    identifier = _FakeIdentifier(result="es")
    resolver = LanguageResolver(identifier)

    assert await resolver.resolve("Hola amigo como estas") == "es"
    assert identifier.calls == ["Hola amigo como estas"]


@pytest.mark.asyncio
async def test_non_english_heuristic_skips_identifier():
    identifier = _FakeIdentifier()
    resolver = LanguageResolver(identifier)

    assert await resolver.resolve("안녕하세요") == "ko"
    assert await resolver.resolve("¿Qué?") == "es"
    assert identifier.calls == []


@pytest.mark.asyncio
async def test_text_without_latin_letters_skips_identifier():
    identifier = _FakeIdentifier()
    resolver = LanguageResolver(identifier)

    assert await resolver.resolve("123 ?!") == "en"
    assert identifier.calls == []


@pytest.mark.asyncio
async def test_undetermined_falls_back_to_heuristic():
    resolver = LanguageResolver(_FakeIdentifier(result="und"))
    assert await resolver.resolve("Hello") == "en"

    resolver = LanguageResolver(_FakeIdentifier(result=""))
    assert await resolver.resolve("Hello") == "en"


@pytest.mark.asyncio
async def test_identifier_failure_falls_back_to_heuristic():
    identifier = _FakeIdentifier(error=RuntimeError("service down"))
    resolver = LanguageResolver(identifier)

    assert await resolver.resolve("Hello") == "en"
    assert len(identifier.calls) == 1


@pytest.mark.asyncio
async def test_no_identifier_returns_heuristic():
    assert await LanguageResolver().resolve("Hello") == "en"


def test_close_releases_identifier_once():
    identifier = _FakeIdentifier()
    resolver = LanguageResolver(identifier)

    resolver.close()
    resolver.close()

    assert identifier.close_calls == 1
