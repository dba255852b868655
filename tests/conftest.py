import asyncio
import inspect

import pytest


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    """Ensure cached settings and READER_TRANSLATION_* env do not leak between tests."""
    from reader_translation.config import get_settings

    for key in (
        "READER_TRANSLATION_TRANSLATION_ENABLED",
        "READER_TRANSLATION_SOURCE_LANGUAGE",
        "READER_TRANSLATION_TARGET_LANGUAGE",
        "READER_TRANSLATION_FONT_SIZE",
        "READER_TRANSLATION_MODEL_DOWNLOAD_UNMETERED_ONLY",
        "READER_TRANSLATION_USE_MOCK_ENGINES",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def pytest_pyfunc_call(pyfuncitem):
    """Run async tests marked with pytest.mark.asyncio without external plugins."""
    if "asyncio" not in pyfuncitem.keywords:
        return None
    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return None
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        argnames = pyfuncitem._fixtureinfo.argnames
        kwargs = {name: pyfuncitem.funcargs[name] for name in argnames}
        loop.run_until_complete(pyfuncitem.obj(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(None)
    return True
