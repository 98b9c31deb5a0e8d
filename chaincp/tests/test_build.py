"""
Tests for the build flow (sync -> select -> write -> self-check -> replace).
"""

import os
import stat
import tempfile

import pytest

from chaincp.build import build_checkpoints, self_check
from chaincp.codec import load_checkpoints, parse_checkpoints, serialize_checkpoints
from chaincp.core import (
    IntegrityMismatchError,
    NetworkParams,
    NoCheckpointsFoundError,
    ReferenceClock,
    SpotCheck,
)
from chaincp.sync import MemoryHeaderSource
from chaincp.tests.helpers import make_chain

START = 1_300_000_000
SPACING = 600


def _params(**kwargs) -> NetworkParams:
    kwargs.setdefault("interval", 100)
    kwargs.setdefault("min_age_secs", 86400)
    return NetworkParams(name="regtest", **kwargs)


def test_build_writes_expected_checkpoints():
    chain = make_chain(1000, start_time=START, spacing=SPACING)
    # Cutoff lands at height 700
    clock = ReferenceClock(now=START + 700 * SPACING + 86400)

    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        result = build_checkpoints(MemoryHeaderSource(chain), _params(), output_path=out, clock=clock)

        assert result.path == os.path.abspath(out)
        assert result.count == 8
        assert result.delivered == 1001

        manager = load_checkpoints(out)
        assert manager.heights() == [0, 100, 200, 300, 400, 500, 600, 700]
        assert manager.digest == result.digest
        assert os.listdir(tmpdir) == ["checkpoints"]


def test_build_is_deterministic():
    chain = make_chain(500, start_time=START, spacing=SPACING)
    clock = ReferenceClock(now=START + 10**8)

    with tempfile.TemporaryDirectory() as tmpdir:
        out1 = os.path.join(tmpdir, "a")
        out2 = os.path.join(tmpdir, "b")
        r1 = build_checkpoints(MemoryHeaderSource(chain), _params(), output_path=out1, clock=clock)
        r2 = build_checkpoints(MemoryHeaderSource(chain), _params(), output_path=out2, clock=clock)

        assert r1.digest == r2.digest
        with open(out1, "rb") as f1, open(out2, "rb") as f2:
            assert f1.read() == f2.read()


def test_build_overwrites_previous_file():
    clock = ReferenceClock(now=START + 10**8)

    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        build_checkpoints(MemoryHeaderSource(make_chain(1000)), _params(), output_path=out, clock=clock)
        result = build_checkpoints(MemoryHeaderSource(make_chain(300)), _params(), output_path=out, clock=clock)

        assert load_checkpoints(out).num_checkpoints() == result.count == 4


def test_build_with_no_checkpoints_leaves_prior_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        with open(out, "wb") as f:
            f.write(b"previous artifact")

        # Every block is younger than the minimum age
        clock = ReferenceClock(now=START)
        with pytest.raises(NoCheckpointsFoundError):
            build_checkpoints(MemoryHeaderSource(make_chain(500, start_time=START)), _params(), output_path=out, clock=clock)

        with open(out, "rb") as f:
            assert f.read() == b"previous artifact"
        assert os.listdir(tmpdir) == ["checkpoints"]


def test_build_spot_check_passes():
    chain = make_chain(1000, start_time=START, spacing=SPACING)
    target = chain[300]
    spot = SpotCheck(timestamp=target.timestamp + 5, height=300, hash_hex=target.hash_hex)
    clock = ReferenceClock(now=START + 10**8)

    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        result = build_checkpoints(
            MemoryHeaderSource(chain), _params(spot_check=spot), output_path=out, clock=clock
        )
        assert result.count == 11


def test_build_spot_check_mismatch_aborts():
    chain = make_chain(1000, start_time=START, spacing=SPACING)
    spot = SpotCheck(timestamp=chain[300].timestamp, height=300, hash_hex="00" * 32)
    clock = ReferenceClock(now=START + 10**8)

    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        with pytest.raises(IntegrityMismatchError, match="Spot check"):
            build_checkpoints(MemoryHeaderSource(chain), _params(spot_check=spot), output_path=out, clock=clock)

        assert os.listdir(tmpdir) == []


def test_self_check_count_mismatch():
    data, digest = serialize_checkpoints(make_chain(3))
    manager = parse_checkpoints(data)

    with pytest.raises(IntegrityMismatchError, match="wrote 5"):
        self_check(manager, 5, digest)


def test_self_check_digest_mismatch():
    data, _ = serialize_checkpoints(make_chain(3))
    manager = parse_checkpoints(data)

    with pytest.raises(IntegrityMismatchError, match="digest"):
        self_check(manager, 4, "00" * 32)


def test_build_artifact_gets_umask_permissions(umask_022):
    """The published file is world-readable like any file created with open()."""
    clock = ReferenceClock(now=START + 10**8)

    with tempfile.TemporaryDirectory() as tmpdir:
        out = os.path.join(tmpdir, "checkpoints")
        build_checkpoints(MemoryHeaderSource(make_chain(300)), _params(), output_path=out, clock=clock)

        assert stat.S_IMODE(os.stat(out).st_mode) == 0o644
