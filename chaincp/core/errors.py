"""
Exception types for the checkpoint builder.
"""


class CheckpointError(Exception):
    """Base class for all checkpoint builder errors."""
    pass


class PolicyViolation(CheckpointError):
    """Raised when there is nothing to checkpoint."""
    pass


class NoCheckpointsFoundError(PolicyViolation):
    """Raised when synchronization finished without a single qualifying block."""
    pass


class EmptySetError(PolicyViolation):
    """Raised when the writer is asked to serialize zero checkpoints."""
    pass


class FormatError(CheckpointError):
    """Raised when a checkpoints file is structurally invalid."""
    pass


class MalformedFileError(FormatError):
    """
    Raised on the first structural violation found while reading.

    Attributes:
        reason: One of the reason constants below (BAD_MAGIC, ...)
        detail: Human-readable description
    """

    BAD_MAGIC = "bad_magic"
    BAD_SIGNATURE_COUNT = "bad_signature_count"
    TRUNCATED = "truncated"
    NON_MONOTONIC = "non_monotonic"
    COUNT_MISMATCH = "count_mismatch"
    EMPTY = "empty"

    def __init__(self, reason: str, detail: str):
        super().__init__(f"{reason}: {detail}")
        self.reason = reason
        self.detail = detail


class IntegrityMismatchError(CheckpointError):
    """Raised when a just-written file does not reload to what was written."""
    pass


class FrozenSetError(CheckpointError):
    """Raised when a finalized checkpoint set is modified."""
    pass


class ConfigError(CheckpointError):
    """Raised on invalid network or policy configuration."""
    pass


class ChainSourceError(CheckpointError, OSError):
    """Raised when the best-chain source cannot deliver headers."""
    pass
