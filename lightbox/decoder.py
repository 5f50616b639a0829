"""Decode primitive: file path -> RGBA pixel buffer, via Pillow."""

from __future__ import annotations
import os

from PIL import Image, ImageOps

from .config import MAX_FILE_SIZE_MB, MAX_IMAGE_DIMENSION
from .logging import log
from .types import PixelBuffer


def decode(path: str,
           max_dimension: int = MAX_IMAGE_DIMENSION,
           max_file_size_mb: float = MAX_FILE_SIZE_MB) -> PixelBuffer:
    """Read and decode one image file.

    Applies EXIF orientation, converts to RGBA and downscales so that
    neither side exceeds `max_dimension` (GPU texture limit). Animated
    formats yield their first frame. Raises whatever opening or decoding
    raises; the cache wraps it into `DecodeError`.
    """
    file_size_mb = os.path.getsize(path) / (1024 * 1024)
    if file_size_mb > max_file_size_mb:
        raise RuntimeError(f"file too large: {file_size_mb:.1f}MB")

    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        else:
            img.load()

    w, h = img.size
    if w <= 0 or h <= 0:
        raise RuntimeError("empty image")

    if w > max_dimension or h > max_dimension:
        scale = min(max_dimension / w, max_dimension / h)
        new_w = max(1, int(w * scale))
        new_h = max(1, int(h * scale))
        log(f"[DECODE][RESIZE] {os.path.basename(path)}: {w}x{h} -> {new_w}x{new_h}")
        img = img.resize((new_w, new_h), Image.Resampling.LANCZOS)

    return PixelBuffer(img.tobytes(), img.width, img.height)
