"""Input Handler - maps raylib input events to commands.

`poll()` reads raylib once per frame into an `InputSnapshot`;
`translate()` turns a snapshot into commands and does not touch raylib.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, List, Sequence, Tuple

from .rl_compat import rl, dropped_files
from .commands import (
    Command,
    NavigateNext, NavigatePrev, OpenPath, ReloadDirectory, CloseApp,
)
from .config import (
    BOTTOM_PANEL_H,
    KEYS_NEXT_IMAGE, KEYS_PREV_IMAGE, KEY_RELOAD_DIR, KEY_CLOSE,
)


@dataclass
class InputSnapshot:
    """Everything the viewer reacts to in one frame."""
    keys_pressed: FrozenSet[int] = frozenset()
    mouse_x: float = 0.0
    mouse_y: float = 0.0
    left_clicked: bool = False
    dropped: Tuple[str, ...] = ()
    screen_w: int = 0
    screen_h: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.keys_pressed or self.left_clicked or self.dropped)


@dataclass
class InputHandler:
    """Handles input polling and command generation."""

    key_next: Sequence[int] = field(default_factory=lambda: list(KEYS_NEXT_IMAGE))
    key_prev: Sequence[int] = field(default_factory=lambda: list(KEYS_PREV_IMAGE))
    key_reload: int = KEY_RELOAD_DIR
    key_close: int = KEY_CLOSE
    bottom_panel_h: int = BOTTOM_PANEL_H

    def watched_keys(self) -> List[int]:
        return [*self.key_next, *self.key_prev, self.key_reload, self.key_close]

    def snapshot(self) -> InputSnapshot:
        pos = rl.GetMousePosition()
        pressed = frozenset(k for k in self.watched_keys() if rl.IsKeyPressed(k))
        return InputSnapshot(
            keys_pressed=pressed,
            mouse_x=pos.x,
            mouse_y=pos.y,
            left_clicked=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_LEFT),
            dropped=tuple(dropped_files()),
            screen_w=rl.GetScreenWidth(),
            screen_h=rl.GetScreenHeight(),
        )

    def translate(self, snap: InputSnapshot) -> List[Command]:
        commands: List[Command] = []

        if self.key_close in snap.keys_pressed:
            return [CloseApp()]

        # last dropped file wins, like any other request
        if snap.dropped:
            commands.append(OpenPath(snap.dropped[-1]))

        if any(k in snap.keys_pressed for k in self.key_next):
            commands.append(NavigateNext())
        if any(k in snap.keys_pressed for k in self.key_prev):
            commands.append(NavigatePrev())
        if self.key_reload in snap.keys_pressed:
            commands.append(ReloadDirectory())

        if snap.left_clicked and snap.mouse_y >= snap.screen_h - self.bottom_panel_h:
            if snap.mouse_x >= snap.screen_w / 2:
                commands.append(NavigateNext())
            else:
                commands.append(NavigatePrev())

        return commands

    def poll(self) -> Tuple[InputSnapshot, List[Command]]:
        snap = self.snapshot()
        return snap, self.translate(snap)


_input_handler = None


def get_input_handler() -> InputHandler:
    """Get the input handler instance."""
    global _input_handler
    if _input_handler is None:
        _input_handler = InputHandler()
    return _input_handler
