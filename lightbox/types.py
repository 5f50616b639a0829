"""Core data types for Lightbox."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Tuple, Union


class Direction(IntEnum):
    """Step delta inside a listing."""
    PREVIOUS = -1
    NEXT = 1


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded RGBA8 pixels, row-major, top row first."""
    data: bytes = field(repr=False)
    width: int
    height: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True, eq=False)
class SharedImage:
    """Read-only handle on a decoded image.

    The cache owns the entry; the renderer and the host loop hold the same
    object by reference. Identity equality: two decodes of one file are two
    different images.
    """
    path: str
    pixels: PixelBuffer = field(repr=False)

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height


# ═══════════════════════════════════════════════════════════════════════════
# Load requests
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Idle:
    """No pending work."""


@dataclass(frozen=True)
class LoadSpecific:
    """Load exactly this file, wherever it lives."""
    path: str


@dataclass(frozen=True)
class LoadNext:
    """Step forward in the active listing."""


@dataclass(frozen=True)
class LoadPrevious:
    """Step backward in the active listing."""


LoadRequest = Union[Idle, LoadSpecific, LoadNext, LoadPrevious]

IDLE = Idle()


# ═══════════════════════════════════════════════════════════════════════════
# Display boundary
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ViewParams:
    """Where a texture lands on screen (scale and offset)."""
    scale: float = 1.0
    offx: float = 0.0
    offy: float = 0.0


@dataclass
class TextureInfo:
    """A GPU texture uploaded from one SharedImage."""
    tex: Any  # rl.Texture2D - using Any to avoid raylib import
    w: int
    h: int
    image: SharedImage

    @property
    def path(self) -> str:
        return self.image.path
