"""
Checkpoint selection.

Provides:
- CheckpointPolicy: interval + minimum age rule
- CheckpointSelector: best-chain callback accumulating a CheckpointSet
"""

from .policy import CheckpointPolicy
from .selector import CheckpointSelector

__all__ = [
    "CheckpointPolicy",
    "CheckpointSelector",
]
