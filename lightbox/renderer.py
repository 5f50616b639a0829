"""Renderer - handles all drawing operations.

The renderer only reads the playback manager and the uploaded texture; it
never changes engine state.
"""

from __future__ import annotations
from dataclasses import dataclass
import os
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .playback import PlaybackManager

from .rl_compat import (
    rl,
    make_rect as RL_Rect, make_vec2 as RL_V2, make_color as RL_Color,
    draw_text as RL_DrawText, measure_text,
)
from .types import ViewParams, TextureInfo
from .config import BG_COLOR, BOTTOM_PANEL_H, STATUS_FONT_SIZE, EMPTY_HINT


def fit_view(iw: int, ih: int, area_w: int, area_h: int) -> ViewParams:
    """Scale-to-fit (never upscale) and center an image inside an area."""
    if iw <= 0 or ih <= 0 or area_w <= 0 or area_h <= 0:
        return ViewParams()
    scale = min(1.0, area_w / iw, area_h / ih)
    return ViewParams(
        scale=scale,
        offx=(area_w - iw * scale) / 2.0,
        offy=(area_h - ih * scale) / 2.0,
    )


def status_text(playback: "PlaybackManager") -> str:
    """Bottom-panel text: error, position in the listing, or the drop hint."""
    err = playback.last_error()
    if err is not None:
        return f"Cannot open {os.path.basename(err.path)}: {err.cause}"
    path = playback.current_path
    if path is None:
        return EMPTY_HINT
    listing = playback.listing
    if listing.is_empty:
        return os.path.basename(path)
    return f"{os.path.basename(path)}  ({listing.index + 1}/{len(listing)})"


@dataclass
class Renderer:
    """
    Draws one frame: background, the current image fitted above the bottom
    panel, and the status line.

    Usage:
        renderer = Renderer()
        renderer.draw_frame(playback, texture)
    """
    panel_h: int = BOTTOM_PANEL_H
    font_size: int = STATUS_FONT_SIZE

    def begin_frame(self) -> None:
        rl.BeginDrawing()

    def end_frame(self) -> None:
        rl.EndDrawing()

    def draw_background(self) -> None:
        rl.ClearBackground(RL_Color(*BG_COLOR))

    def draw_texture(self, ti: Optional[TextureInfo], screen_w: int, screen_h: int) -> None:
        if ti is None:
            return
        v = fit_view(ti.w, ti.h, screen_w, screen_h - self.panel_h)
        rl.DrawTexturePro(
            ti.tex,
            RL_Rect(0, 0, ti.w, ti.h),
            RL_Rect(v.offx, v.offy, ti.w * v.scale, ti.h * v.scale),
            RL_V2(0, 0), 0.0, RL_Color(255, 255, 255, 255)
        )

    def draw_panel(self, playback: "PlaybackManager", screen_w: int, screen_h: int) -> None:
        y = screen_h - self.panel_h
        rl.DrawRectangle(0, y, screen_w, self.panel_h, RL_Color(40, 40, 40, 255))

        # prev / next hit zones
        rl.DrawRectangle(screen_w // 2, y, 1, self.panel_h, RL_Color(90, 90, 90, 255))
        RL_DrawText("<", 12, y + (self.panel_h - self.font_size) // 2, self.font_size,
                    RL_Color(200, 200, 200, 255))
        RL_DrawText(">", screen_w - 24, y + (self.panel_h - self.font_size) // 2, self.font_size,
                    RL_Color(200, 200, 200, 255))

        text = status_text(playback)
        color = RL_Color(240, 120, 120, 255) if playback.last_error() else RL_Color(230, 230, 230, 255)
        tw = measure_text(text, self.font_size)
        RL_DrawText(text, max(40, (screen_w - tw) // 2),
                    y + (self.panel_h - self.font_size) // 2, self.font_size, color)

    def draw_frame(self, playback: "PlaybackManager", texture: Optional[TextureInfo]) -> None:
        screen_w, screen_h = rl.GetScreenWidth(), rl.GetScreenHeight()
        self.begin_frame()
        self.draw_background()
        self.draw_texture(texture, screen_w, screen_h)
        self.draw_panel(playback, screen_w, screen_h)
        self.end_frame()


# Singleton instance
_default_renderer: Optional[Renderer] = None


def get_renderer() -> Renderer:
    """Get the default renderer instance."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = Renderer()
    return _default_renderer
