"""
Header dump source using JSONL format.

Each line: {"height": 2016, "hash": "<64 hex>", "timestamp": 1233063531}
("time" is accepted in place of "timestamp", as in getblockheader output).
"""

import json
from typing import Iterator

from ..core.errors import ChainSourceError
from ..core.header import BlockHeaderMeta
from .source import BestChainSource


class JsonlHeaderSource(BestChainSource):
    """
    Replays a best-chain header dump.

    The dump is read lazily, one line per notification.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def best_blocks(self) -> Iterator[BlockHeaderMeta]:
        try:
            f = open(self.path, "rb")
        except OSError as e:
            raise ChainSourceError(f"Cannot open header dump {self.path}: {e}") from e

        with f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    rec = json.loads(line.decode("utf-8"))
                    header = BlockHeaderMeta.from_dict(rec)
                except (ValueError, KeyError, TypeError) as e:  # UnicodeDecodeError is a ValueError
                    raise ChainSourceError(f"{self.path}:{lineno}: invalid header record: {e}") from e
                yield header
