"""Image decoding helpers."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

ImageInput = Union[str, Path, bytes, Image.Image]


def load_image(source: ImageInput) -> Image.Image:
    """Decode a path, raw bytes or PIL image into an RGB PIL image."""
    if isinstance(source, Image.Image):
        return source if source.mode == "RGB" else source.convert("RGB")
    if isinstance(source, (bytes, bytearray)):
        with Image.open(io.BytesIO(source)) as im:
            return im.convert("RGB")
    path = Path(source).expanduser()
    with Image.open(path) as im:
        return im.convert("RGB")


def to_bgr_array(image: Image.Image) -> np.ndarray:
    """RGB PIL image -> contiguous BGR ndarray (OpenCV/PaddleOCR layout)."""
    rgb = np.asarray(image.convert("RGB"))
    return np.ascontiguousarray(rgb[:, :, ::-1])
