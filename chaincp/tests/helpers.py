"""
Shared test fixtures: synthetic headers and chains.
"""

import hashlib
from typing import List

from chaincp.core.header import BlockHeaderMeta


def make_header(height: int, timestamp: int) -> BlockHeaderMeta:
    block_hash = hashlib.sha256(f"block-{height}".encode("utf-8")).digest()
    return BlockHeaderMeta(height=height, hash=block_hash, timestamp=timestamp)


def make_chain(tip: int, start_time: int = 1_300_000_000, spacing: int = 600) -> List[BlockHeaderMeta]:
    """Headers 0..tip with evenly spaced timestamps."""
    return [make_header(h, start_time + h * spacing) for h in range(tip + 1)]
