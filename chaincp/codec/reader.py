"""
Checkpoints file reader.

Parsing stops at the first structural violation; nothing is repaired,
dropped or reordered.
"""

import hashlib
import io
from typing import BinaryIO, List

from ..core.errors import MalformedFileError
from ..core.header import BlockHeaderMeta
from .format import COUNT, MAGIC, MAX_SIGNATURES, RECORD_SIZE, SIGNATURE_SIZE, unpack_record
from .manager import CheckpointManager


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise MalformedFileError(
            MalformedFileError.TRUNCATED,
            f"{what}: expected {size} bytes, got {got}",
        )
    return data


def read_checkpoints(stream: BinaryIO) -> CheckpointManager:
    """
    Parse a checkpoints file from a binary stream.

    Args:
        stream: Readable binary stream positioned at the magic

    Returns:
        CheckpointManager with the digest of the digest region

    Raises:
        MalformedFileError: On bad magic, signature count out of range,
            zero or mismatched record count, truncation, or heights that
            are not strictly increasing
    """
    magic = stream.read(len(MAGIC))
    if magic != MAGIC:
        raise MalformedFileError(MalformedFileError.BAD_MAGIC, f"expected {MAGIC!r}, got {magic!r}")

    (num_signatures,) = COUNT.unpack(_read_exact(stream, COUNT.size, "signature count"))
    if num_signatures > MAX_SIGNATURES:
        raise MalformedFileError(
            MalformedFileError.BAD_SIGNATURE_COUNT,
            f"{num_signatures} exceeds {MAX_SIGNATURES}",
        )
    signatures = [
        _read_exact(stream, SIGNATURE_SIZE, f"signature {i}") for i in range(num_signatures)
    ]

    digest = hashlib.sha256()
    count_bytes = _read_exact(stream, COUNT.size, "record count")
    digest.update(count_bytes)
    (num_records,) = COUNT.unpack(count_bytes)
    if num_records == 0:
        raise MalformedFileError(MalformedFileError.EMPTY, "record count is zero")

    checkpoints: List[BlockHeaderMeta] = []
    for i in range(num_records):
        buf = _read_exact(stream, RECORD_SIZE, f"record {i} of {num_records}")
        digest.update(buf)
        cp = unpack_record(buf)
        if checkpoints and cp.height <= checkpoints[-1].height:
            raise MalformedFileError(
                MalformedFileError.NON_MONOTONIC,
                f"record {i}: height {cp.height} follows {checkpoints[-1].height}",
            )
        checkpoints.append(cp)

    trailing = stream.read(1)
    if trailing:
        raise MalformedFileError(
            MalformedFileError.COUNT_MISMATCH,
            f"data continues after {num_records} records",
        )

    return CheckpointManager(checkpoints, signatures=signatures, digest=digest.hexdigest())


def parse_checkpoints(data: bytes) -> CheckpointManager:
    """Parse a checkpoints file held in memory."""
    return read_checkpoints(io.BytesIO(data))


def load_checkpoints(path: str) -> CheckpointManager:
    """Load a checkpoints file from disk."""
    with open(path, "rb") as f:
        return read_checkpoints(f)
