"""Command Pattern for user intents.

Input handling produces commands; executing a command only ever touches the
playback manager through `request()` or the directory helpers, never the
cache or the listing directly.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import Application

from .logging import log
from .types import LoadNext, LoadPrevious, LoadSpecific


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, app: "Application") -> bool:
        """Execute the command. Returns True if action was taken."""

    def can_execute(self, app: "Application") -> bool:
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Navigation Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class NavigateNext(Command):
    """Step to the next sibling image."""

    def can_execute(self, app: "Application") -> bool:
        return not app.playback.listing.is_empty

    def execute(self, app: "Application") -> bool:
        if not self.can_execute(app):
            return False
        log("[CMD] NavigateNext")
        app.playback.request(LoadNext())
        return True


@dataclass
class NavigatePrev(Command):
    """Step to the previous sibling image."""

    def can_execute(self, app: "Application") -> bool:
        return not app.playback.listing.is_empty

    def execute(self, app: "Application") -> bool:
        if not self.can_execute(app):
            return False
        log("[CMD] NavigatePrev")
        app.playback.request(LoadPrevious())
        return True


@dataclass
class OpenPath(Command):
    """Open a file, or the first image of a directory (command line, drag and drop)."""
    path: str

    def execute(self, app: "Application") -> bool:
        log(f"[CMD] OpenPath: {self.path}")
        target = app.playback.directory_index.resolve_open_path(self.path)
        if target is None:
            log(f"[CMD] OpenPath: no image in {self.path}")
            return False
        app.playback.request(LoadSpecific(target))
        return True


@dataclass
class ReloadDirectory(Command):
    """Pick up files added or removed in the current directory."""

    def can_execute(self, app: "Application") -> bool:
        return app.playback.current_path is not None

    def execute(self, app: "Application") -> bool:
        if not self.can_execute(app):
            return False
        log("[CMD] ReloadDirectory")
        app.playback.refresh_directory()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Application Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class CloseApp(Command):
    """Close the application."""

    def execute(self, app: "Application") -> bool:
        log("[CMD] CloseApp")
        app.stop()
        return True
