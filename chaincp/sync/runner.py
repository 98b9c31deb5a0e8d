"""
Sync runner: deliver best-chain notifications to a listener.

Delivery is synchronous, on the calling thread, in source order.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.errors import ChainSourceError
from ..core.header import BlockHeaderMeta
from .source import BestBlockListener, BestChainSource


@dataclass(frozen=True)
class SyncResult:
    """
    Result of a synchronization run.

    Fields:
        delivered: Number of notifications delivered
        tip: Last header delivered (None if the source was empty)
    """
    delivered: int
    tip: Optional[BlockHeaderMeta]


def synchronize(
    source: BestChainSource,
    listener: BestBlockListener,
    stop_height: Optional[int] = None,
) -> SyncResult:
    """
    Drive a source until its catch-up point.

    Args:
        source: Best-chain source
        listener: Callback receiving each header (e.g. selector.notify_new_best_block)
        stop_height: Stop after this height (inclusive, None = source end)

    Returns:
        SyncResult

    Raises:
        ChainSourceError: If the source goes backwards in height
    """
    count = 0
    tip: Optional[BlockHeaderMeta] = None

    for header in source.best_blocks():
        if stop_height is not None and header.height > stop_height:
            break
        if tip is not None and header.height < tip.height:
            raise ChainSourceError(
                f"Best chain went backwards: height {header.height} after {tip.height}"
            )
        listener(header)
        tip = header
        count += 1

    return SyncResult(delivered=count, tip=tip)
