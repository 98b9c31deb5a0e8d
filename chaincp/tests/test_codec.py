"""
Tests for the checkpoints file format.

Critical tests:
1. Round trip preserves every record bit for bit
2. Byte layout and digest region
3. Digest determinism
4. Empty input rejected without touching the filesystem
5. Corruption (truncation, magic, reordering) rejected
6. Signature finalization leaves the digest unchanged
"""

import hashlib
import os
import stat
import tempfile

import pytest

from chaincp.codec import (
    MAGIC,
    RECORD_SIZE,
    SIGNATURE_SIZE,
    finalize_file,
    finalize_with_signatures,
    load_checkpoints,
    parse_checkpoints,
    save_checkpoints,
    serialize_checkpoints,
)
from chaincp.core import CheckpointSet, EmptySetError, MalformedFileError
from chaincp.tests.helpers import make_header


def _sample_set(n: int = 5) -> CheckpointSet:
    return CheckpointSet.from_headers(
        make_header(h * 2016, 1_231_006_505 + h * 1_209_600) for h in range(1, n + 1)
    )


def test_round_trip_preserves_records():
    """Parsing serialized bytes yields the same heights, hashes and timestamps."""
    cs = _sample_set(10)
    data, digest = serialize_checkpoints(cs)

    manager = parse_checkpoints(data)

    assert manager.num_checkpoints() == len(cs)
    for original in cs:
        loaded = manager.get(original.height)
        assert loaded is not None
        assert loaded.hash == original.hash
        assert loaded.timestamp == original.timestamp
    assert manager.digest == digest
    assert manager.signature_count == 0


def test_byte_layout():
    """Magic, zero signature count, record count and fixed-width records."""
    cs = _sample_set(3)
    data, _ = serialize_checkpoints(cs)

    assert data[:13] == b"CHECKPOINTS 1"
    assert data[13:17] == b"\x00\x00\x00\x00"
    assert data[17:21] == b"\x00\x00\x00\x03"
    assert len(data) == 21 + 3 * RECORD_SIZE

    first = data[21:21 + RECORD_SIZE]
    assert first[:4] == (2016).to_bytes(4, "big")
    assert first[4:36] == cs.first().hash
    assert first[36:] == cs.first().timestamp.to_bytes(8, "big")


def test_digest_covers_count_and_records_only():
    data, digest = serialize_checkpoints(_sample_set(4))

    assert digest == hashlib.sha256(data[len(MAGIC) + 4:]).hexdigest()
    assert len(digest) == 64


def test_serialization_deterministic():
    """Same set serialized twice gives identical bytes and digest."""
    cs = _sample_set(8)

    data1, digest1 = serialize_checkpoints(cs)
    data2, digest2 = serialize_checkpoints(cs.copy())

    assert data1 == data2
    assert digest1 == digest2


def test_plain_iterable_is_ordered_before_writing():
    headers = list(_sample_set(4))
    data_sorted, _ = serialize_checkpoints(headers)
    data_shuffled, _ = serialize_checkpoints(list(reversed(headers)))

    assert data_sorted == data_shuffled


def test_save_and_load_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")
        digest = save_checkpoints(_sample_set(5), path)

        manager = load_checkpoints(path)
        assert manager.num_checkpoints() == 5
        assert manager.digest == digest


def test_empty_set_rejected():
    with pytest.raises(EmptySetError):
        serialize_checkpoints(CheckpointSet())


def test_empty_set_creates_no_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")

        with pytest.raises(EmptySetError):
            save_checkpoints(CheckpointSet(), path)

        assert not os.path.exists(path)


def test_empty_set_leaves_prior_file_untouched():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")
        save_checkpoints(_sample_set(2), path)
        with open(path, "rb") as f:
            before = f.read()

        with pytest.raises(EmptySetError):
            save_checkpoints([], path)

        with open(path, "rb") as f:
            assert f.read() == before


def test_truncated_file_rejected():
    """Dropping the final byte must fail, never load a partial set."""
    data, _ = serialize_checkpoints(_sample_set(3))

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(data[:-1])
    assert exc.value.reason == MalformedFileError.TRUNCATED


def test_truncated_header_rejected():
    data, _ = serialize_checkpoints(_sample_set(3))

    for cut in (5, 15, 19):
        with pytest.raises(MalformedFileError):
            parse_checkpoints(data[:cut])


def test_flipped_magic_byte_rejected():
    data = bytearray(serialize_checkpoints(_sample_set(3))[0])
    data[3] ^= 0x01

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(bytes(data))
    assert exc.value.reason == MalformedFileError.BAD_MAGIC


def test_reordered_records_rejected():
    """Swapping two records breaks height monotonicity."""
    data, _ = serialize_checkpoints(_sample_set(3))
    start = 21
    rec0 = data[start:start + RECORD_SIZE]
    rec1 = data[start + RECORD_SIZE:start + 2 * RECORD_SIZE]
    swapped = data[:start] + rec1 + rec0 + data[start + 2 * RECORD_SIZE:]

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(swapped)
    assert exc.value.reason == MalformedFileError.NON_MONOTONIC


def test_duplicate_height_rejected():
    data, _ = serialize_checkpoints(_sample_set(2))
    rec0 = data[21:21 + RECORD_SIZE]
    dup = data[:21] + rec0 + rec0

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(dup)
    assert exc.value.reason == MalformedFileError.NON_MONOTONIC


def test_signature_count_out_of_range_rejected():
    data, _ = serialize_checkpoints(_sample_set(2))
    bad = data[:13] + (256).to_bytes(4, "big") + data[17:]

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(bad)
    assert exc.value.reason == MalformedFileError.BAD_SIGNATURE_COUNT


def test_trailing_bytes_rejected():
    data, _ = serialize_checkpoints(_sample_set(2))

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(data + b"\x00")
    assert exc.value.reason == MalformedFileError.COUNT_MISMATCH


def test_record_count_larger_than_data_rejected():
    data, _ = serialize_checkpoints(_sample_set(2))
    bad = data[:17] + (3).to_bytes(4, "big") + data[21:]

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(bad)
    assert exc.value.reason == MalformedFileError.TRUNCATED


def test_zero_record_count_rejected():
    bad = MAGIC + b"\x00" * 8

    with pytest.raises(MalformedFileError) as exc:
        parse_checkpoints(bad)
    assert exc.value.reason == MalformedFileError.EMPTY


def test_finalize_with_signatures_keeps_digest():
    data, digest = serialize_checkpoints(_sample_set(4))
    sigs = [b"\x01" * SIGNATURE_SIZE, b"\x02" * SIGNATURE_SIZE]

    signed = finalize_with_signatures(data, sigs)
    manager = parse_checkpoints(signed)

    assert signed[13:17] == (2).to_bytes(4, "big")
    assert len(signed) == len(data) + 2 * SIGNATURE_SIZE
    assert manager.signatures == tuple(sigs)
    assert manager.digest == digest
    assert manager.num_checkpoints() == 4


def test_finalize_rejects_bad_signatures():
    data, _ = serialize_checkpoints(_sample_set(2))

    with pytest.raises(ValueError):
        finalize_with_signatures(data, [b"\x01" * (SIGNATURE_SIZE - 1)])

    signed = finalize_with_signatures(data, [b"\x01" * SIGNATURE_SIZE])
    with pytest.raises(ValueError):
        finalize_with_signatures(signed, [b"\x02" * SIGNATURE_SIZE])


def test_finalize_file_in_place():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")
        digest = save_checkpoints(_sample_set(3), path)

        finalize_file(path, [b"\x07" * SIGNATURE_SIZE])

        manager = load_checkpoints(path)
        assert manager.signature_count == 1
        assert manager.digest == digest


def test_finalize_file_keeps_permissions_and_leaves_no_temp(umask_022):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")
        save_checkpoints(_sample_set(3), path)
        os.chmod(path, 0o640)

        finalize_file(path, [b"\x07" * SIGNATURE_SIZE])

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o640
        assert os.listdir(tmpdir) == ["checkpoints"]


def test_finalize_file_failure_keeps_unsigned_file(monkeypatch):
    """If the replace step fails, the unsigned file is still complete."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints")
        save_checkpoints(_sample_set(3), path)
        with open(path, "rb") as f:
            before = f.read()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(OSError, match="disk full"):
            finalize_file(path, [b"\x07" * SIGNATURE_SIZE])

        with open(path, "rb") as f:
            assert f.read() == before
        assert os.listdir(tmpdir) == ["checkpoints"]
