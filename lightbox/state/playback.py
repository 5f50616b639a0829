"""Playback state - everything the playback manager owns."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Set

from ..errors import DecodeError
from ..image_cache import ImageCache
from ..types import IDLE, LoadRequest, SharedImage
from .listing import Listing
from .request import PendingRequest


@dataclass
class PlaybackState:
    """State for navigation and the shown image.

    `current_path` is the file the shown handle belongs to (or was meant to
    belong to when its decode failed). It equals `listing.current_path`
    whenever the listing is non-empty, except after a failed decode of a
    file that has since vanished from the directory.
    """
    cache: ImageCache = field(default_factory=ImageCache)
    listing: Listing = field(default_factory=Listing.empty)
    pending: PendingRequest = field(default_factory=PendingRequest)
    last_request: LoadRequest = field(default=IDLE)
    current_path: Optional[str] = None
    shown: Optional[SharedImage] = None
    last_error: Optional[DecodeError] = None
    scanned_dir: Optional[str] = None
    scan_stale: bool = False
    failed: Set[str] = field(default_factory=set)
    idle: bool = False

    def reset(self) -> None:
        """Back to "no file loaded"."""
        self.listing = Listing.empty()
        self.pending = PendingRequest()
        self.last_request = IDLE
        self.current_path = None
        self.shown = None
        self.last_error = None
        self.scanned_dir = None
        self.scan_stale = False
        self.failed = set()
        self.idle = False
