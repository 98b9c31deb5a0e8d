"""
Checkpoint selector: passive accumulator driven by best-chain notifications.
"""

import logging

from ..core.checkpoint_set import CheckpointSet
from ..core.errors import NoCheckpointsFoundError
from ..core.header import BlockHeaderMeta
from .policy import CheckpointPolicy

logger = logging.getLogger(__name__)


class CheckpointSelector:
    """
    Applies a CheckpointPolicy to each new best block.

    The selector owns its CheckpointSet until finish() hands out a copy.
    It never blocks and has no notion of when synchronization is done;
    the orchestrating flow decides that.
    """

    def __init__(self, policy: CheckpointPolicy):
        self.policy = policy
        self._checkpoints = CheckpointSet()
        self.seen = 0
        self.accepted = 0

    def notify_new_best_block(self, header: BlockHeaderMeta) -> bool:
        """
        Best-chain callback.

        Args:
            header: Header of the block that just extended the best chain

        Returns:
            True if the block was recorded as a checkpoint

        Raises:
            FrozenSetError: If called after finish()
        """
        self.seen += 1
        if not self.policy.qualifies(header):
            return False

        is_new = header.height not in self._checkpoints
        self._checkpoints.put(header)
        if is_new:
            self.accepted += 1
        logger.info("Checkpointing block %s at height %d", header.hash_hex, header.height)
        return True

    @property
    def checkpoints(self) -> CheckpointSet:
        """Live set (read-only use; mutate only through notifications)."""
        return self._checkpoints

    def finish(self) -> CheckpointSet:
        """
        Finalize accumulation.

        Returns:
            Copy of the accumulated set, frozen

        Raises:
            NoCheckpointsFoundError: If no block qualified
        """
        self._checkpoints.freeze()
        if len(self._checkpoints) == 0:
            raise NoCheckpointsFoundError(
                f"No checkpoints found after {self.seen} blocks "
                f"(interval={self.policy.interval}, cutoff={self.policy.cutoff})"
            )
        result = self._checkpoints.copy()
        result.freeze()
        return result
