"""
Checkpoint selection policy.

A block becomes a checkpoint iff it sits on a difficulty adjustment boundary
and is older than the configured minimum age relative to the reference clock.
"""

from dataclasses import dataclass

from ..core.clock import ReferenceClock
from ..core.errors import ConfigError
from ..core.header import BlockHeaderMeta
from ..core.params import NetworkParams


@dataclass(frozen=True)
class CheckpointPolicy:
    """
    Interval-and-age policy.

    Fields:
        interval: Blocks between difficulty adjustment boundaries
        min_age_secs: Minimum age before a block may be checkpointed
        now: Reference timestamp captured once at startup
    """
    interval: int
    min_age_secs: int
    now: int

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval}")

    @classmethod
    def for_network(cls, params: NetworkParams, clock: ReferenceClock) -> "CheckpointPolicy":
        return cls(interval=params.interval, min_age_secs=params.min_age_secs, now=clock.now)

    @property
    def cutoff(self) -> int:
        return self.now - self.min_age_secs

    def qualifies(self, header: BlockHeaderMeta) -> bool:
        return header.height % self.interval == 0 and header.timestamp <= self.cutoff
