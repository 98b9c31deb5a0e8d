"""
JSON-RPC source for a bitcoind-compatible node.

Walks the best chain with getblockhash/getblockheader from start_height up to
the tip reported when iteration starts; that tip is the catch-up point.
"""

import base64
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Iterator, Optional

from ..core.errors import ChainSourceError
from ..core.header import BlockHeaderMeta
from .source import BestChainSource

logger = logging.getLogger(__name__)


class RpcHeaderSource(BestChainSource):
    """
    Fetches headers from a local fully-synced node over JSON-RPC.

    Requests are made on the calling thread, one header at a time.
    """

    def __init__(
        self,
        url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        start_height: int = 0,
        timeout: float = 30,
    ):
        self.url = url
        self.start_height = start_height
        self.timeout = timeout
        self._auth: Optional[str] = None
        if user is not None:
            token = f"{user}:{password or ''}".encode("utf-8")
            self._auth = "Basic " + base64.b64encode(token).decode("ascii")
        self._next_id = 0

    def call(self, method: str, *params: Any) -> Any:
        """
        Perform one JSON-RPC call.

        Raises:
            ChainSourceError: On transport failure or RPC error response
        """
        self._next_id += 1
        payload = {"jsonrpc": "1.0", "id": self._next_id, "method": method, "params": list(params)}
        headers = {"Content-Type": "application/json"}
        if self._auth:
            headers["Authorization"] = self._auth

        req = urllib.request.Request(
            self.url,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            # bitcoind reports RPC errors with HTTP 500 and a JSON body
            body = e.read().decode("utf-8", "ignore")
            if not body:
                raise ChainSourceError(f"RPC {method} failed: HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            raise ChainSourceError(f"RPC {method} failed: {e}") from e

        try:
            resp = json.loads(body)
        except json.JSONDecodeError as e:
            raise ChainSourceError(f"RPC {method} returned invalid JSON") from e

        if resp.get("error"):
            raise ChainSourceError(f"RPC {method} error: {resp['error']}")
        return resp.get("result")

    def header_at(self, height: int) -> BlockHeaderMeta:
        block_hash = self.call("getblockhash", height)
        header = self.call("getblockheader", block_hash)
        try:
            return BlockHeaderMeta.from_hex(header["height"], header["hash"], header["time"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainSourceError(f"Malformed header at height {height}: {e}") from e

    def best_blocks(self) -> Iterator[BlockHeaderMeta]:
        tip = int(self.call("getblockcount"))
        logger.info("Syncing headers %d..%d from %s", self.start_height, tip, self.url)
        for height in range(self.start_height, tip + 1):
            yield self.header_at(height)
