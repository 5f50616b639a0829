"""Directory listing - ordered sibling images and the selected index."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Listing:
    """Immutable snapshot of one directory's navigable images.

    A non-empty listing always has a valid `index`; an empty one has 0.
    """
    entries: Tuple[str, ...] = field(default_factory=tuple)
    index: int = 0

    def __post_init__(self):
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))
        if self.entries:
            if not 0 <= self.index < len(self.entries):
                raise IndexError(f"index {self.index} outside listing of {len(self.entries)}")
        elif self.index != 0:
            raise IndexError("empty listing must have index 0")

    @classmethod
    def empty(cls) -> Listing:
        return cls((), 0)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def current_path(self) -> Optional[str]:
        if self.entries:
            return self.entries[self.index]
        return None

    def index_of(self, path: str) -> Optional[int]:
        try:
            return self.entries.index(path)
        except ValueError:
            return None

    def with_index(self, idx: int) -> Listing:
        return replace(self, index=idx)

    def neighbor_indices(self, idx: Optional[int] = None) -> Tuple[int, int]:
        """(previous, next) of `idx`, wrapping at both ends."""
        if idx is None:
            idx = self.index
        n = len(self.entries)
        if n == 0:
            return (0, 0)
        return ((idx - 1) % n, (idx + 1) % n)

    def window(self, idx: Optional[int] = None) -> List[str]:
        """Current, next, previous paths around `idx` without duplicates."""
        if not self.entries:
            return []
        if idx is None:
            idx = self.index
        prev_i, next_i = self.neighbor_indices(idx)
        result: List[str] = []
        for i in (idx, next_i, prev_i):
            path = self.entries[i]
            if path not in result:
                result.append(path)
        return result
