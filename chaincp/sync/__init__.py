"""
Chain synchronization collaborator.

This module provides:
- BestChainSource: Abstract best-block notification source
- MemoryHeaderSource: In-memory headers
- JsonlHeaderSource: Header dump (JSONL)
- RpcHeaderSource: bitcoind-compatible JSON-RPC node
- synchronize: Drives a source into a listener
"""

from .source import BestChainSource, BestBlockListener, MemoryHeaderSource
from .jsonl_source import JsonlHeaderSource
from .rpc_source import RpcHeaderSource
from .runner import SyncResult, synchronize

__all__ = [
    "BestChainSource",
    "BestBlockListener",
    "MemoryHeaderSource",
    "JsonlHeaderSource",
    "RpcHeaderSource",
    "SyncResult",
    "synchronize",
]
