"""Application - main loop orchestrator.

One iteration of the host loop:
- release textures of images the cache evicted last frame
- poll input -> commands -> `PlaybackManager.request()`
- `PlaybackManager.tick()`
- upload the shown image if needed and draw
- after a load, rescan the directory to pick up filesystem changes
- sleep briefly when the engine reports nothing left to do
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import os
import time
import traceback

from .playback import PlaybackManager
from .renderer import Renderer, get_renderer
from .input_handler import InputHandler, get_input_handler
from .commands import Command
from .rl_compat import (
    rl, init_window, set_window_title, texture_from_pixels, unload_texture, get_texture_id,
)
from .config import (
    TARGET_FPS, IDLE_SLEEP_S, WINDOW_W, WINDOW_H, WINDOW_TITLE, EMPTY_HINT,
)
from .logging import log, increment_frame, get_frame
from .types import LoadSpecific, SharedImage, TextureInfo


class TextureStore:
    """GPU textures for shared images, keyed by path.

    Only the shown image is uploaded. Textures of evicted images are queued
    and unloaded at the start of the next frame, never mid-draw.
    """

    def __init__(self,
                 upload: Callable[[bytes, int, int], Any] = texture_from_pixels,
                 unload: Callable[[Any], None] = unload_texture):
        self._upload = upload
        self._unload = unload
        self._textures: Dict[str, TextureInfo] = {}
        self.to_unload: List[Any] = []

    def __len__(self) -> int:
        return len(self._textures)

    def texture_for(self, image: Optional[SharedImage]) -> Optional[TextureInfo]:
        if image is None:
            return None
        ti = self._textures.get(image.path)
        if ti is not None and ti.image is image:
            return ti
        if ti is not None:
            # same path, new decode
            self.to_unload.append(ti.tex)
        tex = self._upload(image.pixels.data, image.width, image.height)
        ti = TextureInfo(tex=tex, w=image.width, h=image.height, image=image)
        self._textures[image.path] = ti
        log(f"[TEX] Uploaded {os.path.basename(image.path)} id={get_texture_id(tex)}")
        return ti

    def on_evict(self, image: SharedImage) -> None:
        ti = self._textures.get(image.path)
        if ti is not None and ti.image is image:
            del self._textures[image.path]
            self.to_unload.append(ti.tex)

    def process_deferred_unloads(self) -> int:
        count = 0
        while self.to_unload:
            tex = self.to_unload.pop()
            try:
                self._unload(tex)
                count += 1
            except Exception as e:
                log(f"[UNLOAD][ERR] {e!r}")
        return count

    def clear(self) -> None:
        for ti in self._textures.values():
            self.to_unload.append(ti.tex)
        self._textures.clear()
        self.process_deferred_unloads()


@dataclass
class Application:
    """
    Host loop around the playback engine.

    Usage:
        app = Application()
        app.initialize(start_path)
        app.run()
    """

    textures: TextureStore = field(default_factory=TextureStore)
    playback: Optional[PlaybackManager] = None
    renderer: Renderer = field(default_factory=get_renderer)
    input_handler: InputHandler = field(default_factory=get_input_handler)
    running: bool = False
    idle_sleep_s: float = IDLE_SLEEP_S
    window_open: bool = False
    set_title: Callable[[str], None] = set_window_title

    def __post_init__(self):
        if self.playback is None:
            self.playback = PlaybackManager(on_evict=self.textures.on_evict)

    def initialize(self, start_path: Optional[str] = None) -> bool:
        """Open the window and queue the first image. Returns True on success."""
        try:
            init_window(WINDOW_W, WINDOW_H, WINDOW_TITLE)
            rl.SetTargetFPS(TARGET_FPS)
        except Exception as e:
            log(f"[INIT][CRITICAL] Failed to initialize window: {e!r}")
            log(f"[INIT][CRITICAL] Traceback:\n{traceback.format_exc()}")
            return False
        self.window_open = True

        if start_path:
            self.playback.request(LoadSpecific(start_path))
        else:
            self.set_title(f"{WINDOW_TITLE} - {EMPTY_HINT}")
        log(f"[APP] Window {WINDOW_W}x{WINDOW_H} start={start_path}")
        return True

    def run(self) -> None:
        self.running = True
        log("[APP] Starting main loop")
        try:
            while self.running:
                if rl.WindowShouldClose():
                    self.running = False
                    break
                self.frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def frame(self) -> None:
        """Execute a single frame."""
        self.textures.process_deferred_unloads()

        snap, commands = self.input_handler.poll()
        for cmd in commands:
            self.execute(cmd)
            if not self.running:
                return

        load_requested = self.playback.has_pending_request
        if self.playback.tick():
            self._update_title()

        texture = self.textures.texture_for(self.playback.current_image())
        self.renderer.draw_frame(self.playback, texture)

        if load_requested and self.playback.refresh_directory():
            self._update_title()

        increment_frame()

        if self.should_sleep(load_requested, bool(commands) or not snap.is_empty):
            time.sleep(self.idle_sleep_s)

    def execute(self, cmd: Command) -> bool:
        return cmd.execute(self)

    def should_sleep(self, load_requested: bool, had_input: bool) -> bool:
        return self.playback.idle_hint() and not load_requested and not had_input

    def _update_title(self) -> None:
        path = self.playback.current_path
        title = f"{WINDOW_TITLE} - {os.path.basename(path)}" if path else WINDOW_TITLE
        try:
            self.set_title(title)
        except Exception as e:
            log(f"[APP][TITLE][ERR] {e!r}")

    def _cleanup(self) -> None:
        log(f"[APP] Starting cleanup after {get_frame()} frames")
        self.playback.shutdown()
        self.textures.clear()
        if self.window_open:
            try:
                log("[APP] Closing window")
                rl.CloseWindow()
            except Exception as e:
                log(f"[APP][CLOSE][ERR] {e!r}")
            self.window_open = False
        log("[APP] Cleanup complete")

    def stop(self) -> None:
        """Stop the main loop."""
        self.running = False
