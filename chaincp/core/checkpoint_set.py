"""
Ordered height -> header mapping accumulated during synchronization.

Heights are kept in a sorted list searched with bisect; headers live in a
dict keyed by height. Best-chain notifications arrive in height order, so
inserts are appends in practice.
"""

from bisect import bisect_left
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import FrozenSetError
from .header import BlockHeaderMeta


class CheckpointSet:
    """
    Ordered checkpoint mapping.

    Guarantees:
    - Heights strictly increasing on iteration
    - No duplicate heights (re-insert replaces, last write wins)
    - Read-only once frozen
    """

    def __init__(self) -> None:
        self._heights: List[int] = []
        self._by_height: Dict[int, BlockHeaderMeta] = {}
        self._frozen = False

    @classmethod
    def from_headers(cls, headers: Iterable[BlockHeaderMeta]) -> "CheckpointSet":
        cs = cls()
        for header in headers:
            cs.put(header)
        return cs

    def put(self, header: BlockHeaderMeta) -> None:
        """
        Insert header keyed by its height.

        Raises:
            FrozenSetError: If the set has been finalized
        """
        if self._frozen:
            raise FrozenSetError("checkpoint set is finalized")
        height = header.height
        if height not in self._by_height:
            idx = bisect_left(self._heights, height)
            self._heights.insert(idx, height)
        self._by_height[height] = header

    def get(self, height: int) -> Optional[BlockHeaderMeta]:
        return self._by_height.get(height)

    def heights(self) -> List[int]:
        return list(self._heights)

    def first(self) -> Optional[BlockHeaderMeta]:
        if not self._heights:
            return None
        return self._by_height[self._heights[0]]

    def last(self) -> Optional[BlockHeaderMeta]:
        if not self._heights:
            return None
        return self._by_height[self._heights[-1]]

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "CheckpointSet":
        """Unfrozen copy with the same entries."""
        return CheckpointSet.from_headers(self)

    def __len__(self) -> int:
        return len(self._heights)

    def __contains__(self, height: object) -> bool:
        return height in self._by_height

    def __iter__(self) -> Iterator[BlockHeaderMeta]:
        for height in self._heights:
            yield self._by_height[height]

    def __repr__(self) -> str:
        return f"CheckpointSet(size={len(self)}, frozen={self._frozen})"
