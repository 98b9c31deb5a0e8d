"""
Checkpoints file writer.

The SHA-256 digest covers the record count and the records only. It is
returned to the caller, not stored in the file; a detached signature over it
is what a later signing pass installs in the signature slot.
"""

import hashlib
import io
import os
import stat
import tempfile
from typing import BinaryIO, Iterable, Optional, Sequence, Tuple

from ..core.checkpoint_set import CheckpointSet
from ..core.errors import EmptySetError
from ..core.header import BlockHeaderMeta
from .format import (
    COUNT,
    MAGIC,
    MAX_SIGNATURES,
    SIGNATURE_SIZE,
    SIGNATURES_OFFSET,
    pack_record,
)
from .reader import parse_checkpoints


class DigestingWriter:
    """
    Pass-through binary writer that hashes what it writes while enabled.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.digest = hashlib.sha256()
        self.enabled = False

    def write(self, data: bytes) -> None:
        self.stream.write(data)
        if self.enabled:
            self.digest.update(data)

    def hexdigest(self) -> str:
        return self.digest.hexdigest()


def _ordered(checkpoints: Iterable[BlockHeaderMeta]) -> Sequence[BlockHeaderMeta]:
    if isinstance(checkpoints, CheckpointSet):
        return list(checkpoints)
    # Plain iterables go through a CheckpointSet for ordering and dedup
    return list(CheckpointSet.from_headers(checkpoints))


def write_checkpoints(checkpoints: Iterable[BlockHeaderMeta], stream: BinaryIO) -> str:
    """
    Serialize checkpoints to a binary stream.

    Args:
        checkpoints: CheckpointSet (or headers, ordered by height here)
        stream: Writable binary stream

    Returns:
        Hex SHA-256 digest of the record count and records

    Raises:
        EmptySetError: If there is nothing to write (nothing is written)
        OSError: On underlying write failure
    """
    headers = _ordered(checkpoints)
    if not headers:
        raise EmptySetError("Refusing to write an empty checkpoints file")

    out = DigestingWriter(stream)
    out.write(MAGIC)
    out.write(COUNT.pack(0))  # signature count, filled in by a signing pass
    out.enabled = True
    out.write(COUNT.pack(len(headers)))
    for header in headers:
        out.write(pack_record(header))
    return out.hexdigest()


def serialize_checkpoints(checkpoints: Iterable[BlockHeaderMeta]) -> Tuple[bytes, str]:
    """Serialize to bytes. Returns (data, hex digest)."""
    buf = io.BytesIO()
    digest = write_checkpoints(checkpoints, buf)
    return buf.getvalue(), digest


def save_checkpoints(checkpoints: Iterable[BlockHeaderMeta], path: str) -> str:
    """
    Write checkpoints to path, truncating any existing file.

    The emptiness check happens before the file is opened, so an empty set
    never creates or clobbers a file. No atomic replace is done here.

    Returns:
        Hex digest
    """
    headers = _ordered(checkpoints)
    if not headers:
        raise EmptySetError("Refusing to write an empty checkpoints file")

    with open(path, "wb") as f:
        digest = write_checkpoints(headers, f)
        f.flush()
    return digest


def finalize_with_signatures(data: bytes, signatures: Sequence[bytes]) -> bytes:
    """
    Install detached signatures into an unsigned checkpoints file.

    Rewrites the signature count and inserts the signature blobs ahead of the
    digest region. The digest region is copied untouched, so the digest the
    signatures cover does not change.

    Args:
        data: Unsigned checkpoints file contents
        signatures: Opaque SIGNATURE_SIZE-byte blobs from the signing collaborator

    Returns:
        Signed file contents

    Raises:
        ValueError: If the file is already signed or a blob is malformed
        MalformedFileError: If data is not a valid checkpoints file
    """
    manager = parse_checkpoints(data)
    if manager.signature_count != 0:
        raise ValueError(f"File already carries {manager.signature_count} signatures")
    if len(signatures) > MAX_SIGNATURES:
        raise ValueError(f"At most {MAX_SIGNATURES} signatures fit, got {len(signatures)}")
    for idx, sig in enumerate(signatures):
        if len(sig) != SIGNATURE_SIZE:
            raise ValueError(f"Signature {idx} is {len(sig)} bytes, expected {SIGNATURE_SIZE}")

    return b"".join([
        MAGIC,
        COUNT.pack(len(signatures)),
        *signatures,
        data[SIGNATURES_OFFSET:],
    ])


def default_file_mode() -> int:
    """Permissions open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def replace_file(path: str, data: bytes, mode: Optional[int] = None) -> None:
    """
    Write data to a temp file beside path, then os.replace it over path.

    Readers see either the old file or the complete new one.

    Args:
        path: Target file
        data: New contents
        mode: Permission bits (default: umask-derived, as for a fresh file)
    """
    target = os.path.abspath(path)
    fd, tmp_path = tempfile.mkstemp(prefix=".checkpoints-", dir=os.path.dirname(target))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, default_file_mode() if mode is None else mode)
        os.replace(tmp_path, target)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def finalize_file(path: str, signatures: Sequence[bytes]) -> None:
    """
    Apply finalize_with_signatures to a file.

    The signed file replaces the unsigned one atomically and keeps its
    permissions; an interrupted run leaves the unsigned file intact.
    """
    with open(path, "rb") as f:
        data = f.read()
    mode = stat.S_IMODE(os.stat(path).st_mode)
    signed = finalize_with_signatures(data, signatures)
    replace_file(path, signed, mode=mode)
