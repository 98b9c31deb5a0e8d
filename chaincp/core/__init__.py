"""
Core checkpoint primitives.

This module provides the foundational types shared by selector and codec:
- BlockHeaderMeta: Immutable header metadata (height, hash, timestamp)
- CheckpointSet: Ordered height -> header mapping
- ReferenceClock: "Now" captured once per build
- NetworkParams: Interval and minimum-age configuration
- Errors: PolicyViolation, FormatError, IntegrityMismatchError, ...
"""

from .header import BlockHeaderMeta, HASH_SIZE
from .checkpoint_set import CheckpointSet
from .clock import ReferenceClock
from .params import NetworkParams, SpotCheck, NETWORKS, ONE_WEEK_SECS, get_network, load_params
from .errors import (
    CheckpointError,
    PolicyViolation,
    NoCheckpointsFoundError,
    EmptySetError,
    FormatError,
    MalformedFileError,
    IntegrityMismatchError,
    FrozenSetError,
    ConfigError,
    ChainSourceError,
)

__all__ = [
    "BlockHeaderMeta",
    "HASH_SIZE",
    "CheckpointSet",
    "ReferenceClock",
    "NetworkParams",
    "SpotCheck",
    "NETWORKS",
    "ONE_WEEK_SECS",
    "get_network",
    "load_params",
    "CheckpointError",
    "PolicyViolation",
    "NoCheckpointsFoundError",
    "EmptySetError",
    "FormatError",
    "MalformedFileError",
    "IntegrityMismatchError",
    "FrozenSetError",
    "ConfigError",
    "ChainSourceError",
]
