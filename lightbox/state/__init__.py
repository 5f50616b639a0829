"""State holders for the playback engine.

`PlaybackState` is imported from `lightbox.state.playback` directly.
"""

from .listing import Listing
from .request import PendingRequest

__all__ = [
    'Listing',
    'PendingRequest',
]
