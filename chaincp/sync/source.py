"""
BestChainSource abstract interface.

Defines the contract of the chain-sync collaborator that feeds the selector.
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List

from ..core.header import BlockHeaderMeta

BestBlockListener = Callable[[BlockHeaderMeta], object]


class BestChainSource(ABC):
    """
    Source of "new best block" notifications.

    All implementations must guarantee:
    - Best chain only (no stale or orphaned blocks)
    - Non-decreasing height order
    - Iteration ends once the catch-up point is reached
    """

    @abstractmethod
    def best_blocks(self) -> Iterator[BlockHeaderMeta]:
        """
        Yield best-chain headers in height order.

        Raises:
            ChainSourceError: If headers cannot be fetched or parsed
        """
        pass

    def close(self) -> None:
        """Release resources held by the source."""
        pass

    def __enter__(self) -> "BestChainSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MemoryHeaderSource(BestChainSource):
    """Source over headers already in memory."""

    def __init__(self, headers: Iterable[BlockHeaderMeta]):
        self.headers: List[BlockHeaderMeta] = list(headers)

    def best_blocks(self) -> Iterator[BlockHeaderMeta]:
        return iter(self.headers)
