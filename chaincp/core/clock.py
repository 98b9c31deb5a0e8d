"""
Reference clock for the checkpoint age policy.

"Now" is read from the system clock exactly once per build so that every
block in a run is judged against the same cutoff.
"""

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceClock:
    """
    Captured reference time.

    In production: ReferenceClock.capture() at startup.
    In tests: ReferenceClock(now=...) with a fixed value.
    """
    now: int

    @classmethod
    def capture(cls) -> "ReferenceClock":
        return cls(now=int(time.time()))

    def cutoff(self, min_age_secs: int) -> int:
        """Latest timestamp a block may carry and still be old enough."""
        return self.now - min_age_secs
