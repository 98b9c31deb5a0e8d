"""
Block header metadata captured for checkpointing.

Only the fields a checkpoint needs are kept: height, hash and timestamp.
"""

from dataclasses import dataclass
from typing import Any, Dict

HASH_SIZE = 32
MAX_HEIGHT = 2**32 - 1
MAX_TIMESTAMP = 2**64 - 1


@dataclass(frozen=True)
class BlockHeaderMeta:
    """
    Immutable header metadata.

    Fields:
        height: Block height (0 = genesis)
        hash: 32 raw bytes, big-endian (display) order
        timestamp: Header time in seconds since Unix epoch
    """
    height: int
    hash: bytes
    timestamp: int

    def __post_init__(self) -> None:
        if not 0 <= self.height <= MAX_HEIGHT:
            raise ValueError(f"height out of range: {self.height}")
        if not isinstance(self.hash, bytes) or len(self.hash) != HASH_SIZE:
            raise ValueError(f"hash must be {HASH_SIZE} bytes")
        if not 0 <= self.timestamp <= MAX_TIMESTAMP:
            raise ValueError(f"timestamp out of range: {self.timestamp}")

    @property
    def hash_hex(self) -> str:
        return self.hash.hex()

    @classmethod
    def from_hex(cls, height: int, hash_hex: str, timestamp: int) -> "BlockHeaderMeta":
        """Build from a hex hash string as printed by nodes and explorers."""
        try:
            raw = bytes.fromhex(hash_hex)
        except ValueError:
            raise ValueError(f"invalid hash hex: {hash_hex!r}")
        return cls(height=int(height), hash=raw, timestamp=int(timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "hash": self.hash_hex,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockHeaderMeta":
        """
        Deserialize from dict.

        Accepts "time" as an alias of "timestamp" (getblockheader output).
        """
        ts = data["timestamp"] if "timestamp" in data else data["time"]
        return cls.from_hex(data["height"], data["hash"], ts)
