"""Pending load request - a single overwrite-only slot."""

from __future__ import annotations
from dataclasses import dataclass, field

from ..types import IDLE, Idle, LoadRequest


@dataclass
class PendingRequest:
    """Holds at most one request; the newest one wins.

    Requests issued between two ticks collapse to the last one, so rapid
    clicking jumps straight to the latest intent instead of replaying every
    step.
    """
    request: LoadRequest = field(default=IDLE)

    @property
    def is_idle(self) -> bool:
        return isinstance(self.request, Idle)

    def set(self, request: LoadRequest) -> None:
        self.request = request

    def peek(self) -> LoadRequest:
        return self.request

    def take(self) -> LoadRequest:
        """Return the pending request and reset the slot to Idle."""
        request, self.request = self.request, IDLE
        return request
