"""
Checkpoint build flow.

Sync -> select -> write to a temp file -> reload and self-check -> replace.
The output artifact is either fully valid or not touched at all.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .codec.manager import CheckpointManager
from .codec.reader import load_checkpoints
from .codec.writer import default_file_mode, write_checkpoints
from .core.clock import ReferenceClock
from .core.errors import IntegrityMismatchError
from .core.params import NetworkParams, SpotCheck
from .selector import CheckpointPolicy, CheckpointSelector
from .sync.runner import synchronize
from .sync.source import BestChainSource

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "checkpoints"


@dataclass(frozen=True)
class BuildResult:
    """
    Result of a successful build.

    Fields:
        path: Absolute path of the written checkpoints file
        digest: Hex SHA-256 of the record region
        count: Number of checkpoints written
        delivered: Number of best-chain notifications processed
    """
    path: str
    digest: str
    count: int
    delivered: int


def self_check(
    manager: CheckpointManager,
    expected_count: int,
    expected_digest: str,
    spot_check: Optional[SpotCheck] = None,
) -> None:
    """
    Verify a reloaded file against what was written.

    Raises:
        IntegrityMismatchError: On count, digest or spot check mismatch
    """
    if manager.num_checkpoints() != expected_count:
        raise IntegrityMismatchError(
            f"Reloaded {manager.num_checkpoints()} checkpoints, wrote {expected_count}"
        )
    if manager.digest != expected_digest:
        raise IntegrityMismatchError(
            f"Reloaded digest {manager.digest} does not match written {expected_digest}"
        )
    if spot_check is None:
        return

    found = manager.checkpoint_before(spot_check.timestamp)
    if found is None:
        raise IntegrityMismatchError(f"No checkpoint at or before {spot_check.timestamp}")
    if found.height != spot_check.height or found.hash_hex != spot_check.hash_hex:
        raise IntegrityMismatchError(
            f"Spot check at {spot_check.timestamp}: expected {spot_check.height}/{spot_check.hash_hex}, "
            f"got {found.height}/{found.hash_hex}"
        )


def build_checkpoints(
    source: BestChainSource,
    params: NetworkParams,
    output_path: str = DEFAULT_OUTPUT,
    clock: Optional[ReferenceClock] = None,
    stop_height: Optional[int] = None,
) -> BuildResult:
    """
    Build a checkpoints file from a best-chain source.

    Args:
        source: Chain-sync collaborator
        params: Interval, minimum age and optional spot check
        output_path: Target file, replaced on success
        clock: Reference clock (captured now if None)
        stop_height: Optional catch-up height

    Returns:
        BuildResult

    Raises:
        NoCheckpointsFoundError: If no block qualified
        IntegrityMismatchError: If the written file does not reload identically
        ChainSourceError: If the source fails
        OSError: On filesystem errors
    """
    clock = clock or ReferenceClock.capture()
    policy = CheckpointPolicy.for_network(params, clock)
    selector = CheckpointSelector(policy)

    logger.info(
        "Building checkpoints for %s (interval=%d, cutoff=%d)",
        params.name, policy.interval, policy.cutoff,
    )
    sync = synchronize(source, selector.notify_new_best_block, stop_height=stop_height)
    checkpoints = selector.finish()
    logger.info("Selected %d checkpoints from %d blocks", len(checkpoints), sync.delivered)

    target = os.path.abspath(output_path)
    fd, tmp_path = tempfile.mkstemp(prefix=".checkpoints-", dir=os.path.dirname(target))
    try:
        with os.fdopen(fd, "wb") as f:
            digest = write_checkpoints(checkpoints, f)
            f.flush()
            os.fsync(f.fileno())

        manager = load_checkpoints(tmp_path)
        self_check(manager, len(checkpoints), digest, params.spot_check)

        # mkstemp creates 0600; published file gets umask-derived permissions
        os.chmod(tmp_path, default_file_mode())
        os.replace(tmp_path, target)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    return BuildResult(path=target, digest=digest, count=len(checkpoints), delivered=sync.delivered)
