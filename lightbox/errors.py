"""Engine error types.

None of these escape `PlaybackManager.tick`; they are turned into state
(empty listing, absent image) and kept for the status surface.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .state.listing import Listing


class LightboxError(Exception):
    """Base class for recoverable engine failures."""


class DirectoryUnreadable(LightboxError):
    """The parent directory of a path could not be listed."""

    def __init__(self, directory: str, cause: Optional[BaseException] = None):
        self.directory = directory
        self.cause = cause
        super().__init__(f"cannot list directory {directory!r}: {cause!r}")


class EntryNotFound(LightboxError):
    """The path is not among the recognised images of its directory.

    `listing` holds what the scan did find, with index 0.
    """

    def __init__(self, path: str, listing: "Listing"):
        self.path = path
        self.listing = listing
        super().__init__(f"{path!r} is not a listed image ({len(listing)} candidates)")


class DecodeError(LightboxError):
    """Decoding a file failed. Never cached; the next visit retries."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot decode {path!r}: {cause}")
