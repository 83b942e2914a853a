from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Callable

# Millisecond wall clock; the engine takes any callable with this shape
Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class TurnClock:
    """Deadline of the current turn.

    Nothing ticks in the background: expiry is only noticed when a caller asks
    :meth:`expired`, so an idle session stays past its deadline until the next
    submission arrives.
    """
    turn_seconds: int
    started_at: int = 0
    expires_at: int = 0

    def restart(self, now: int):
        self.started_at = now
        self.expires_at = now + self.turn_seconds * 1000

    def expired(self, now: int) -> bool:
        return now > self.expires_at
