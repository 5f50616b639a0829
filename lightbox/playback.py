"""Playback manager - turns load requests into the image to display.

The host loop calls `tick()` once per iteration. Everything happens
synchronously inside it: take the pending request, update the listing,
decode through the cache, prune the cache to the neighbour window, and
compute the idle hint. Failures never leave `tick()`; they become an empty
listing or an absent image plus a log line and `last_error()`.
"""

from __future__ import annotations
import os
from typing import List, Optional

from .config import PREFETCH_BUDGET_PER_TICK, PREFETCH_ON_LOAD
from .directory import DirectoryIndex
from .errors import DecodeError, DirectoryUnreadable, EntryNotFound
from .image_cache import DecodeFn, EvictFn, ImageCache
from .logging import log
from .state.listing import Listing
from .state.playback import PlaybackState
from .types import (
    Direction, Idle, LoadNext, LoadPrevious, LoadRequest, LoadSpecific, SharedImage,
)


def _name(path: Optional[str]) -> str:
    return os.path.basename(path) if path else "<none>"


class PlaybackManager:
    """Owns the listing, the image cache and the shown-image handle."""

    def __init__(self,
                 decode: Optional[DecodeFn] = None,
                 directory_index: Optional[DirectoryIndex] = None,
                 on_evict: Optional[EvictFn] = None,
                 prefetch_on_load: bool = PREFETCH_ON_LOAD,
                 prefetch_budget: int = PREFETCH_BUDGET_PER_TICK):
        self.directory_index = directory_index or DirectoryIndex()
        self.state = PlaybackState(cache=ImageCache(decode, on_evict))
        self.prefetch_on_load = prefetch_on_load
        self.prefetch_budget = prefetch_budget
        self._decoded_this_tick = False

    # ═══════════════════════════════════════════════════════════════════════
    # Collaborator interface
    # ═══════════════════════════════════════════════════════════════════════

    def request(self, request: LoadRequest) -> None:
        """Replace the pending request. Nothing is queued."""
        self.state.pending.set(request)

    def current_image(self) -> Optional[SharedImage]:
        return self.state.shown

    def idle_hint(self) -> bool:
        return self.state.idle

    def last_error(self) -> Optional[DecodeError]:
        return self.state.last_error

    @property
    def listing(self) -> Listing:
        return self.state.listing

    @property
    def cache(self) -> ImageCache:
        return self.state.cache

    @property
    def current_path(self) -> Optional[str]:
        return self.state.current_path

    @property
    def last_request(self) -> LoadRequest:
        return self.state.last_request

    @property
    def has_pending_request(self) -> bool:
        return not self.state.pending.is_idle

    # ═══════════════════════════════════════════════════════════════════════
    # Per-frame transition
    # ═══════════════════════════════════════════════════════════════════════

    def tick(self) -> bool:
        """Materialize the pending request. Returns True if the shown image changed."""
        st = self.state
        req = st.pending.take()
        st.last_request = req
        self._decoded_this_tick = False
        before = st.shown

        if isinstance(req, LoadSpecific):
            self._load_specific(req.path)
        elif isinstance(req, LoadNext):
            self._step(Direction.NEXT)
        elif isinstance(req, LoadPrevious):
            self._step(Direction.PREVIOUS)
        else:
            self._prefetch(self.prefetch_budget)

        st.idle = (isinstance(req, Idle)
                   and not self._decoded_this_tick
                   and not self._prefetch_candidates())
        return st.shown is not before

    def _load_specific(self, path: str) -> None:
        st = self.state
        path = os.path.abspath(path)
        dirpath = os.path.dirname(path)
        exists = os.path.isfile(path)

        idx = None
        if exists and dirpath == st.scanned_dir and not st.scan_stale:
            idx = st.listing.index_of(path)

        if idx is not None:
            st.listing = st.listing.with_index(idx)
        else:
            st.listing = self._scan_for_load(path)

        if not exists and path in st.cache:
            # deleted since it was cached; the decode reports it missing
            st.cache.discard(path)

        log(f"[PLAYBACK] LoadSpecific {_name(path)} -> index={st.listing.index}/{len(st.listing)}")
        self._show(path)

    def _scan_for_load(self, path: str) -> Listing:
        st = self.state
        st.scanned_dir = os.path.dirname(path)
        st.scan_stale = False
        try:
            return self.directory_index.scan(path)
        except DirectoryUnreadable as e:
            log(f"[DIR][ERR] {e}")
        except EntryNotFound as e:
            log(f"[DIR][ERR] {e}")
        return Listing.empty()

    def _step(self, direction: Direction) -> None:
        st = self.state
        if st.listing.is_empty:
            log(f"[PLAYBACK] {direction.name} ignored: nothing to navigate")
            return
        old = st.listing.index
        st.listing = st.listing.with_index(DirectoryIndex.step(st.listing, direction))
        log(f"[PLAYBACK] {direction.name}: {old} -> {st.listing.index}")
        self._show(st.listing.current_path)

    def _show(self, path: str) -> None:
        """Decode `path` as the new current image and move the window there."""
        st = self.state
        st.current_path = path
        self._decoded_this_tick = True
        try:
            image = st.cache.get_or_decode(path)
        except DecodeError as e:
            st.shown = None
            st.last_error = e
            st.failed.add(path)
            log(f"[PLAYBACK][ERR] {e}")
        else:
            st.shown = image
            st.last_error = None
            st.failed.discard(path)

        self._retain(path)
        if self.prefetch_on_load:
            self._prefetch(None)

    def _retain(self, path: Optional[str]) -> None:
        """Prune the cache and the failed set to the window around `path`."""
        st = self.state
        st.cache.retain_window(path, st.listing)
        st.failed &= set(self._window())

    # ═══════════════════════════════════════════════════════════════════════
    # Neighbour prefetch
    # ═══════════════════════════════════════════════════════════════════════

    def _window(self) -> List[str]:
        st = self.state
        if st.current_path is None:
            return []
        return ImageCache.window(st.current_path, st.listing)

    def _prefetch_candidates(self) -> List[str]:
        st = self.state
        return [p for p in st.cache.missing(self._window()) if p not in st.failed]

    def _prefetch(self, budget: Optional[int]) -> None:
        todo = self._prefetch_candidates()
        if budget is not None:
            todo = todo[:budget]
        for path in todo:
            self._decoded_this_tick = True
            try:
                self.state.cache.get_or_decode(path)
            except DecodeError as e:
                self.state.failed.add(path)
                log(f"[PLAYBACK][PREFETCH][ERR] {e}")

    # ═══════════════════════════════════════════════════════════════════════
    # Directory maintenance
    # ═══════════════════════════════════════════════════════════════════════

    def invalidate_directory(self) -> None:
        """Force the next LoadSpecific to rescan, even inside the same directory."""
        self.state.scan_stale = True

    def refresh_directory(self) -> bool:
        """Rescan the active directory now. Returns True if the shown image changed."""
        st = self.state
        path = st.current_path
        if path is None or st.listing.is_empty:
            return False

        before = st.shown
        try:
            listing = self.directory_index.scan(path)
        except DirectoryUnreadable as e:
            log(f"[DIR][ERR] refresh: {e}")
            return False
        except EntryNotFound as e:
            found = e.listing
            log(f"[DIR] {_name(path)} vanished; {len(found)} images left")
            st.scan_stale = False
            if st.last_error is not None and st.last_error.path == path:
                # keep reporting the failed file; navigation resumes from the clamped index
                if not found.is_empty:
                    found = found.with_index(min(st.listing.index, len(found) - 1))
                st.listing = found
                self._retain(path)
                return False
            if found.is_empty:
                st.listing = found
                st.current_path = None
                st.shown = None
                self._retain(None)
            else:
                st.listing = found.with_index(min(st.listing.index, len(found) - 1))
                self._show(st.listing.current_path)
            return st.shown is not before

        st.listing = listing
        st.scan_stale = False
        self._retain(path)
        return False

    def shutdown(self) -> None:
        """Drop every cached image and return to "no file loaded"."""
        self.state.cache.clear()
        self.state.reset()
        log("[PLAYBACK] Shutdown")
