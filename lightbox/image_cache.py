"""Neighbour-window image cache.

Holds decoded images for the current file and its previous/next siblings.
Sequential browsing makes "neighbours of current" a better predictor than
recency, so this is a keyed window rather than an LRU.
"""

from __future__ import annotations
import os
from typing import Callable, Dict, Iterable, List, Optional

from .decoder import decode as pillow_decode
from .errors import DecodeError
from .logging import log
from .state.listing import Listing
from .types import PixelBuffer, SharedImage

DecodeFn = Callable[[str], PixelBuffer]
EvictFn = Callable[[SharedImage], None]


class ImageCache:
    """Maps absolute path -> SharedImage.

    The cache is the only mutator of its entries. Decode failures are never
    stored, so a file that was briefly locked decodes on the next visit.
    """

    def __init__(self, decode: Optional[DecodeFn] = None, on_evict: Optional[EvictFn] = None):
        self._decode: DecodeFn = decode or pillow_decode
        self._entries: Dict[str, SharedImage] = {}
        self.on_evict = on_evict
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    @property
    def paths(self) -> List[str]:
        return list(self._entries)

    def get(self, path: str) -> Optional[SharedImage]:
        return self._entries.get(path)

    def get_or_decode(self, path: str) -> SharedImage:
        """Cached image for `path`, decoding it on a miss.

        Raises:
            DecodeError: the decode primitive failed; nothing is cached.
        """
        image = self._entries.get(path)
        if image is not None:
            self.hits += 1
            return image

        self.misses += 1
        try:
            pixels = self._decode(path)
        except Exception as e:
            raise DecodeError(path, e) from e

        image = SharedImage(path=path, pixels=pixels)
        self._entries[path] = image
        log(f"[CACHE] Decoded {os.path.basename(path)} {image.width}x{image.height} (size={len(self._entries)})")
        return image

    @staticmethod
    def window(center_path: str, listing: Listing) -> List[str]:
        """Retention window around `center_path`: current, next, previous."""
        idx = listing.index_of(center_path)
        if idx is None:
            return [center_path]
        return listing.window(idx)

    def retain_window(self, center_path: Optional[str], listing: Listing) -> List[str]:
        """Evict every entry outside the window of `center_path`.

        Returns the evicted paths. With no center everything goes.
        """
        keep = set(self.window(center_path, listing)) if center_path else set()
        evicted = [p for p in self._entries if p not in keep]
        for path in evicted:
            self._evict(path)
        return evicted

    def missing(self, paths: Iterable[str]) -> List[str]:
        return [p for p in paths if p not in self._entries]

    def discard(self, path: str) -> None:
        """Evict `path` if cached."""
        if path in self._entries:
            self._evict(path)

    def clear(self) -> None:
        for path in list(self._entries):
            self._evict(path)

    def _evict(self, path: str) -> None:
        image = self._entries.pop(path)
        log(f"[CACHE] Evicted {os.path.basename(path)}")
        if self.on_evict is not None:
            self.on_evict(image)

    def get_stats(self) -> Dict[str, int]:
        return {
            "size": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
        }
