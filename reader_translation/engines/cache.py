"""
Process-wide PaddleOCR instances, one per recognition language.

Loading a model takes seconds and hundreds of MB, so every recognition
engine of the same language shares one instance.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
import threading
import warnings

warnings.filterwarnings("ignore", category=UserWarning, module="paddle")
os.environ.setdefault("PADDLE_PDX_LOG_LEVEL", "ERROR")
os.environ.setdefault("PADDLE_PDX_DISABLE_MODEL_SOURCE_CHECK", "True")
for _name in ("ppocr", "paddlex"):
    logging.getLogger(_name).setLevel(logging.ERROR)

logger = logging.getLogger(__name__)

DETECTION_MODEL = "PP-OCRv5_mobile_det"

# PaddleOCR lang -> recognition model
REC_MODELS = {
    "latin": "latin_PP-OCRv5_mobile_rec",
    "ch": "PP-OCRv5_mobile_rec",
    "japan": "PP-OCRv5_mobile_rec",
    "korean": "korean_PP-OCRv5_mobile_rec",
}

_instances: dict = {}
_lock = threading.Lock()


@contextlib.contextmanager
def suppress_native_stderr():
    """
    Redirect file descriptor 2 to /dev/null while native code initializes.

    Paddle prints from C++ directly to fd 2, past ``sys.stderr``. Set
    ``READER_TRANSLATION_NATIVE_STDERR=1`` to keep that output.
    """
    keep = os.environ.get("READER_TRANSLATION_NATIVE_STDERR", "0") not in ("", "0")
    try:
        fd = sys.stderr.fileno()
    except (AttributeError, OSError, ValueError):
        fd = None
    if keep or fd is None:
        yield
        return

    saved = os.dup(fd)
    with open(os.devnull, "w") as devnull:
        os.dup2(devnull.fileno(), fd)
    try:
        yield
    finally:
        os.dup2(saved, fd)
        os.close(saved)


def _build_ocr(lang: str):
    from paddleocr import PaddleOCR

    rec_model = REC_MODELS.get(lang, REC_MODELS["latin"])
    logger.info("Loading PaddleOCR: lang=%s det=%s rec=%s", lang, DETECTION_MODEL, rec_model)
    with suppress_native_stderr():
        return PaddleOCR(
            lang=lang,
            use_doc_orientation_classify=False,
            use_doc_unwarping=False,
            use_textline_orientation=False,
            text_detection_model_name=DETECTION_MODEL,
            text_recognition_model_name=rec_model,
        )


def get_cached_ocr(lang: str):
    """Shared PaddleOCR instance for ``lang``, loaded on first use."""
    ocr = _instances.get(lang)
    if ocr is not None:
        return ocr
    with _lock:
        if lang not in _instances:
            _instances[lang] = _build_ocr(lang)
        return _instances[lang]


def release_cached_ocr(lang: str) -> bool:
    """Forget the instance for ``lang``; True if one was loaded."""
    with _lock:
        return _instances.pop(lang, None) is not None
