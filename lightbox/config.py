"""Application configuration constants."""

from __future__ import annotations

# Host loop
TARGET_FPS = 60
IDLE_SLEEP_S = 0.001

# Window
WINDOW_W = 1024
WINDOW_H = 768
WINDOW_TITLE = "Lightbox"
BOTTOM_PANEL_H = 32
BG_COLOR = (230, 230, 230)
STATUS_FONT_SIZE = 18
EMPTY_HINT = "Drag and drop an image on the window."

# Decode limits
MAX_IMAGE_DIMENSION = 8192
MAX_FILE_SIZE_MB = 200

# Cache / prefetch
PREFETCH_ON_LOAD = True
PREFETCH_BUDGET_PER_TICK = 1

# Directory ordering: "casefold", "bytewise" or "natural"
SORT_COLLATION = "casefold"

# Hotkeys (raylib key codes)
# See: https://github.com/raysan5/raylib/blob/master/src/raylib.h
KEYS_NEXT_IMAGE = (262, 68, 32)     # KEY_RIGHT, KEY_D, KEY_SPACE
KEYS_PREV_IMAGE = (263, 65, 259)    # KEY_LEFT, KEY_A, KEY_BACKSPACE
KEY_RELOAD_DIR = 294                # KEY_F5
KEY_CLOSE = 256                     # KEY_ESCAPE

# Supported image extensions
IMG_EXTS = frozenset({
    ".png", ".jpg", ".jpeg", ".jpe", ".jfif", ".gif", ".bmp", ".ico",
    ".tif", ".tiff", ".webp", ".tga", ".pbm", ".pgm", ".ppm", ".pnm",
})
