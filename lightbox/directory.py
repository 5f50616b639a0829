"""Directory index - listing, filtering and ordering sibling images."""

from __future__ import annotations
import os
import re
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from .config import IMG_EXTS, SORT_COLLATION
from .errors import DirectoryUnreadable, EntryNotFound
from .logging import log
from .state.listing import Listing
from .types import Direction

_DIGITS = re.compile(r"(\d+)")


def casefold_key(name: str) -> Tuple[str, str]:
    # raw name breaks ties so "A.png" and "a.png" still order totally
    return (name.casefold(), name)


def bytewise_key(name: str) -> Tuple[bytes, str]:
    return (os.fsencode(name), name)


def natural_key(name: str) -> Tuple[list, str]:
    """'img2' sorts before 'img10'; text runs compare case-insensitively."""
    parts = [int(t) if t.isdigit() else t.casefold() for t in _DIGITS.split(name)]
    return (parts, name)


SORT_KEYS: Dict[str, Callable[[str], tuple]] = {
    "casefold": casefold_key,
    "bytewise": bytewise_key,
    "natural": natural_key,
}


def is_supported_image(filepath: str, extensions: FrozenSet[str] = IMG_EXTS) -> bool:
    """Check if file has a supported image extension."""
    ext = os.path.splitext(filepath)[1].lower()
    return ext in extensions


def list_images(dirpath: str,
                extensions: FrozenSet[str] = IMG_EXTS,
                collation: str = SORT_COLLATION) -> List[str]:
    """List supported image files in `dirpath`, ordered by file name.

    Raises:
        DirectoryUnreadable: the directory is missing, not a directory, or
            not readable.
    """
    try:
        key = SORT_KEYS[collation]
    except KeyError:
        raise ValueError(f"unknown collation {collation!r}") from None

    try:
        names = os.listdir(dirpath)
    except OSError as e:
        raise DirectoryUnreadable(dirpath, e) from e

    names = [
        n for n in names
        if is_supported_image(n, extensions) and os.path.isfile(os.path.join(dirpath, n))
    ]
    names.sort(key=key)
    return [os.path.join(dirpath, n) for n in names]


class DirectoryIndex:
    """Builds listings for a file's directory.

    The allow-list and the collation are configuration; both default to the
    values in `lightbox.config`.
    """

    def __init__(self, extensions: Optional[FrozenSet[str]] = None,
                 collation: Optional[str] = None):
        self.extensions = frozenset(e.lower() for e in (extensions or IMG_EXTS))
        self.collation = collation or SORT_COLLATION
        if self.collation not in SORT_KEYS:
            raise ValueError(f"unknown collation {self.collation!r}")
        self.scans = 0

    def scan(self, path: str) -> Listing:
        """Listing of `path`'s directory with the index set to `path`.

        Raises:
            DirectoryUnreadable: the parent cannot be listed.
            EntryNotFound: `path` is not among the listed images. The
                exception carries the listing that was found.
        """
        path = os.path.abspath(path)
        dirpath = os.path.dirname(path)
        self.scans += 1
        entries = list_images(dirpath, self.extensions, self.collation)
        log(f"[DIR] Scanned {dirpath}: {len(entries)} images")
        try:
            idx = entries.index(path)
        except ValueError:
            raise EntryNotFound(path, Listing(tuple(entries), 0)) from None
        return Listing(tuple(entries), idx)

    def scan_directory(self, dirpath: str) -> Listing:
        """Listing of a directory itself, positioned on its first image."""
        self.scans += 1
        entries = list_images(os.path.abspath(dirpath), self.extensions, self.collation)
        return Listing(tuple(entries), 0)

    def resolve_open_path(self, path: str) -> Optional[str]:
        """File to open for a command-line argument or a dropped path.

        A directory resolves to its first image, or None when it has no
        images or cannot be listed. Anything else is returned as is.
        """
        path = os.path.abspath(path)
        if not os.path.isdir(path):
            return path
        try:
            listing = self.scan_directory(path)
        except DirectoryUnreadable as e:
            log(f"[DIR][ERR] {e}")
            return None
        log(f"[DIR] Directory {path}: {len(listing)} images")
        return listing.current_path

    @staticmethod
    def step(listing: Listing, direction: Direction) -> int:
        """Index after one step, wrapping at both ends; 0 for an empty listing."""
        if listing.is_empty:
            return 0
        return (listing.index + int(direction)) % len(listing)
