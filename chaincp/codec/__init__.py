"""
Checkpoints file codec.

Provides:
- Binary format constants and record layout
- Writer with SHA-256 digest over the record region
- Signature slot finalization for an external signing step
- Reader producing a CheckpointManager
- CheckpointManager with "checkpoint at or before time T" lookup
"""

from .format import MAGIC, MAX_SIGNATURES, RECORD_SIZE, SIGNATURE_SIZE
from .manager import CheckpointManager
from .reader import read_checkpoints, parse_checkpoints, load_checkpoints
from .writer import (
    write_checkpoints,
    serialize_checkpoints,
    save_checkpoints,
    finalize_with_signatures,
    finalize_file,
)

__all__ = [
    "MAGIC",
    "MAX_SIGNATURES",
    "RECORD_SIZE",
    "SIGNATURE_SIZE",
    "CheckpointManager",
    "read_checkpoints",
    "parse_checkpoints",
    "load_checkpoints",
    "write_checkpoints",
    "serialize_checkpoints",
    "save_checkpoints",
    "finalize_with_signatures",
    "finalize_file",
]
