"""Raylib compatibility layer - abstracts differences between raylibpy and python-raylib."""

from __future__ import annotations
import ctypes
from typing import Any, List

try:
    import raylibpy as rl
    RL_VERSION = "raylibpy"
except ImportError:
    import raylib as rl
    RL_VERSION = "python-raylib"

# raylib PixelFormat enum
PIXELFORMAT_UNCOMPRESSED_R8G8B8A8 = 7

FLAG_WINDOW_RESIZABLE = 0x00000004


class _CTypesRect(ctypes.Structure):
    _fields_ = [
        ("x", ctypes.c_float),
        ("y", ctypes.c_float),
        ("width", ctypes.c_float),
        ("height", ctypes.c_float),
    ]


class _CTypesVec2(ctypes.Structure):
    _fields_ = [
        ("x", ctypes.c_float),
        ("y", ctypes.c_float),
    ]


class _CTypesImage(ctypes.Structure):
    _fields_ = [
        ("data", ctypes.c_void_p),
        ("width", ctypes.c_int),
        ("height", ctypes.c_int),
        ("mipmaps", ctypes.c_int),
        ("format", ctypes.c_int),
    ]


def _cstr(text: str) -> Any:
    return text.encode("utf-8") if hasattr(rl, "ffi") else text


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Rectangle for whichever binding is loaded."""
    if hasattr(rl, "ffi"):
        r = rl.ffi.new("Rectangle *", [float(x), float(y), float(w), float(h)])
        return r[0]
    if hasattr(rl, "Rectangle"):
        return rl.Rectangle(x, y, w, h)
    return _CTypesRect(float(x), float(y), float(w), float(h))


def make_vec2(x: float, y: float) -> Any:
    """Vector2 for whichever binding is loaded."""
    if hasattr(rl, "ffi"):
        v = rl.ffi.new("Vector2 *", [float(x), float(y)])
        return v[0]
    if hasattr(rl, "Vector2"):
        return rl.Vector2(x, y)
    return _CTypesVec2(float(x), float(y))


def make_color(r: int, g: int, b: int, a: int = 255) -> Any:
    """Color for whichever binding is loaded."""
    if hasattr(rl, "ffi"):
        c = rl.ffi.new("Color *", [int(r), int(g), int(b), int(a)])
        return c[0]
    return rl.Color(int(r), int(g), int(b), int(a))


def draw_text(text: str, x: int, y: int, size: int, color: Any) -> None:
    """Draw text with encoding fallback."""
    try:
        rl.DrawText(text, x, y, size, color)
    except TypeError:
        rl.DrawText(text.encode("utf-8"), x, y, size, color)


def measure_text(text: str, size: int) -> int:
    """Measure text width with encoding fallback."""
    try:
        return rl.MeasureText(text, size)
    except TypeError:
        return rl.MeasureText(text.encode("utf-8"), size)


def init_window(w: int, h: int, title: str) -> None:
    rl.SetConfigFlags(FLAG_WINDOW_RESIZABLE)
    rl.InitWindow(w, h, _cstr(title))


def set_window_title(title: str) -> None:
    try:
        rl.SetWindowTitle(_cstr(title))
    except TypeError:
        rl.SetWindowTitle(title.encode("utf-8"))


def texture_from_pixels(data: bytes, width: int, height: int) -> Any:
    """Upload RGBA8 pixels to a GPU texture.

    The pixel memory stays owned by Python; raylib copies it during the call.
    """
    if hasattr(rl, "ffi"):
        buf = rl.ffi.from_buffer(data)
        img = rl.ffi.new("Image *")
        img.data = rl.ffi.cast("void *", buf)
        img.width = width
        img.height = height
        img.mipmaps = 1
        img.format = PIXELFORMAT_UNCOMPRESSED_R8G8B8A8
        return rl.LoadTextureFromImage(img[0])

    raw = ctypes.create_string_buffer(data, len(data))
    img = _CTypesImage(ctypes.cast(raw, ctypes.c_void_p), width, height, 1,
                       PIXELFORMAT_UNCOMPRESSED_R8G8B8A8)
    return rl.LoadTextureFromImage(img)


def unload_texture(tex: Any) -> None:
    if is_texture_valid(tex):
        rl.UnloadTexture(tex)


def dropped_files() -> List[str]:
    """Paths dropped on the window since the last call."""
    if not rl.IsFileDropped():
        return []
    files = rl.LoadDroppedFiles()
    try:
        paths = []
        for i in range(files.count):
            p = files.paths[i]
            if hasattr(rl, "ffi"):
                p = rl.ffi.string(p)
            if isinstance(p, bytes):
                p = p.decode("utf-8", errors="replace")
            paths.append(p)
        return paths
    finally:
        rl.UnloadDroppedFiles(files)


def get_texture_id(tex: Any) -> int:
    """Safely get texture ID."""
    return getattr(tex, "id", 0) or 0


def is_texture_valid(tex: Any) -> bool:
    """Check if texture is valid and loaded."""
    return get_texture_id(tex) > 0


__all__ = [
    'rl',
    'RL_VERSION',
    'make_rect',
    'make_vec2',
    'make_color',
    'draw_text',
    'measure_text',
    'init_window',
    'set_window_title',
    'texture_from_pixels',
    'unload_texture',
    'dropped_files',
    'get_texture_id',
    'is_texture_valid',
]
