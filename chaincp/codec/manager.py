"""
Loaded checkpoint set with time-based lookup.
"""

from bisect import bisect_right
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..core.errors import MalformedFileError
from ..core.header import BlockHeaderMeta


class CheckpointManager:
    """
    Read-only checkpoints loaded from a file.

    Lookup index:
    - _times: checkpoint timestamps sorted ascending
    - _best: _best[i] is the highest-height checkpoint among the first i+1
      entries of _times

    so "greatest height with timestamp <= T" is one bisect plus one list read,
    and stays correct if chain timestamps wobble between checkpoints.
    """

    def __init__(
        self,
        checkpoints: Iterable[BlockHeaderMeta],
        signatures: Sequence[bytes] = (),
        digest: Optional[str] = None,
    ):
        self._checkpoints: List[BlockHeaderMeta] = list(checkpoints)
        self.signatures = tuple(signatures)
        self.digest = digest

        for prev, cur in zip(self._checkpoints, self._checkpoints[1:]):
            if cur.height <= prev.height:
                raise MalformedFileError(
                    MalformedFileError.NON_MONOTONIC,
                    f"height {cur.height} follows {prev.height}",
                )

        self._by_height: Dict[int, BlockHeaderMeta] = {cp.height: cp for cp in self._checkpoints}

        by_time = sorted(self._checkpoints, key=lambda cp: (cp.timestamp, cp.height))
        self._times = [cp.timestamp for cp in by_time]
        self._best: List[BlockHeaderMeta] = []
        for cp in by_time:
            if self._best and self._best[-1].height > cp.height:
                self._best.append(self._best[-1])
            else:
                self._best.append(cp)

    def num_checkpoints(self) -> int:
        return len(self._checkpoints)

    @property
    def signature_count(self) -> int:
        return len(self.signatures)

    def heights(self) -> List[int]:
        return [cp.height for cp in self._checkpoints]

    def get(self, height: int) -> Optional[BlockHeaderMeta]:
        return self._by_height.get(height)

    def latest(self) -> Optional[BlockHeaderMeta]:
        return self._checkpoints[-1] if self._checkpoints else None

    def checkpoint_before(self, timestamp: int) -> Optional[BlockHeaderMeta]:
        """
        Find the checkpoint to start validation from.

        Args:
            timestamp: Seconds since epoch

        Returns:
            Highest checkpoint with timestamp <= given time, or None when no
            checkpoint is that old (caller falls back to genesis)
        """
        idx = bisect_right(self._times, timestamp)
        if idx == 0:
            return None
        return self._best[idx - 1]

    def __len__(self) -> int:
        return len(self._checkpoints)

    def __iter__(self) -> Iterator[BlockHeaderMeta]:
        return iter(self._checkpoints)

    def __repr__(self) -> str:
        return f"CheckpointManager(checkpoints={len(self)}, signatures={self.signature_count})"
