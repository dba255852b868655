import numpy as np
import pytest
from PIL import Image

from reader_translation.engines import MockRecognitionEngine, PaddleRecognitionEngine
from reader_translation.engines.paddle_engine import parse_ocr_output
from reader_translation.errors import RecognitionEngineError
from reader_translation.models import ScriptFamily


class _FakeLegacyOCR:
    def predict(self, chunk):  # pragma: no cover - force legacy path
        raise AttributeError("predict not supported")

    def ocr(self, chunk, det=True, rec=True, cls=False):
        # Mimic PaddleOCR legacy output: a list containing a list of detections.
        return [
            [
                (
                    [[0, 0], [10, 0], [10, 10], [0, 10]],
                    ("테스트1", 0.95),
                ),
                (
                    [[12, 0], [22, 0], [22, 10], [12, 10]],
                    ("테스트2", 0.90),
                ),
            ]
        ]


class _FakeOCR:
    def predict(self, _chunk):
        return [
            {
                "rec_texts": ["Hi", "low", "  "],
                "rec_scores": np.array([0.9, 0.2, 0.99]),
                "rec_boxes": np.array([[0, 0, 5, 5], [5, 5, 9, 9], [1, 1, 2, 2]]),
            }
        ]


class _BrokenOCR:
    def predict(self, _chunk):
        raise RuntimeError("predict crashed")

    def ocr(self, chunk, det=True, rec=True, cls=False):
        raise RuntimeError("ocr crashed")


def _image():
    return Image.new("RGB", (32, 32), "white")


def test_parse_predict_output_filters_scores_and_blank_text():
    blocks = parse_ocr_output(_FakeOCR().predict(None), min_score=0.5)

    assert [b.text for b in blocks] == ["Hi"]
    assert blocks[0].bounding_box.width == 5


def test_parse_accepts_tuple_scores_and_polygons():
    result = [
        {
            "rec_texts": ["Hi"],
            "rec_scores": [(0.9, 0.1)],
            "rec_polys": [[[1, 2], [11, 2], [11, 7], [1, 7]]],
        }
    ]

    blocks = parse_ocr_output(result)

    assert blocks[0].bounding_box.x == 1
    assert blocks[0].bounding_box.y == 2
    assert blocks[0].bounding_box.right == 11
    assert blocks[0].bounding_box.bottom == 7


def test_parse_empty_output():
    assert parse_ocr_output(None) == []
    assert parse_ocr_output([]) == []


@pytest.mark.asyncio
async def test_process_handles_nested_legacy_output():
    engine = PaddleRecognitionEngine(ScriptFamily.KOREAN)
    engine._ocr = _FakeLegacyOCR()

    blocks = await engine.process(_image())

    assert [b.text for b in blocks] == ["테스트1", "테스트2"]
    assert blocks[1].bounding_box.x == 12


@pytest.mark.asyncio
async def test_process_raises_when_every_call_fails():
    engine = PaddleRecognitionEngine(ScriptFamily.LATIN)
    engine._ocr = _BrokenOCR()

    with pytest.raises(RecognitionEngineError) as exc_info:
        await engine.process(_image())
    assert exc_info.value.error_code == "recognition_failed"


def test_engine_languages():
    assert PaddleRecognitionEngine(ScriptFamily.LATIN).lang == "latin"
    assert PaddleRecognitionEngine(ScriptFamily.CHINESE).lang == "ch"
    assert PaddleRecognitionEngine(ScriptFamily.JAPANESE).lang == "japan"
    assert PaddleRecognitionEngine(ScriptFamily.KOREAN).lang == "korean"


@pytest.mark.asyncio
async def test_mock_engine_is_deterministic():
    engine = MockRecognitionEngine(ScriptFamily.JAPANESE)

    first = await engine.process(_image())
    second = await engine.process(_image())

    assert first == second
    assert [b.text for b in first] == ["こんにちは"]
    assert engine.calls == 2


def test_cached_ocr_is_shared_and_released(monkeypatch):
    from reader_translation.engines import cache

    built = []

    def _fake_build(lang):
        built.append(lang)
        return object()

    monkeypatch.setattr(cache, "_build_ocr", _fake_build)
    monkeypatch.setattr(cache, "_instances", {})

    first = cache.get_cached_ocr("korean")
    assert cache.get_cached_ocr("korean") is first
    assert built == ["korean"]
    assert cache.release_cached_ocr("korean") is True
    assert cache.release_cached_ocr("korean") is False


def test_engine_close_releases_shared_instance(monkeypatch):
    from reader_translation.engines import cache

    monkeypatch.setattr(cache, "_build_ocr", lambda lang: object())
    monkeypatch.setattr(cache, "_instances", {})
    engine = PaddleRecognitionEngine(ScriptFamily.CHINESE)
    engine._init_ocr()

    engine.close()

    assert cache._instances == {}
