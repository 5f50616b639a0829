"""Shared fixtures.

Every test gets an in-memory logger so engine log lines can be asserted on
and nothing is printed. Fixture images are real files written with Pillow.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Set

import pytest
from PIL import Image

from lightbox.decoder import decode
from lightbox.logging import MemoryLogger, set_logger
from lightbox.types import PixelBuffer


@pytest.fixture(autouse=True)
def memory_log():
    logger = MemoryLogger()
    previous = set_logger(logger)
    yield logger
    set_logger(previous)


def _write_image(path: Path, size=(4, 3), color=(200, 30, 30, 255), fmt=None) -> str:
    Image.new("RGBA", size, color).save(path, format=fmt)
    return str(path)


@pytest.fixture
def make_image() -> Callable[..., str]:
    return _write_image


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory with a.png, b.png, c.png."""
    for name in ("a.png", "b.png", "c.png"):
        _write_image(tmp_path / name)
    return tmp_path


class CountingDecoder:
    """Real Pillow decode that records calls and can be told to fail."""

    def __init__(self):
        self.calls: List[str] = []
        self.fail: Set[str] = set()

    def __call__(self, path: str) -> PixelBuffer:
        self.calls.append(path)
        if path in self.fail:
            raise OSError(f"locked: {path}")
        return decode(path)

    def count(self, path: str) -> int:
        return self.calls.count(path)


@pytest.fixture
def decoder() -> CountingDecoder:
    return CountingDecoder()
