"""
Network parameters and policy configuration.

Values come from explicit arguments first, then environment variables,
then the built-in network defaults.

Environment Variables:
    CHAINCP_NETWORK: Network name (bitcoin, testnet, regtest, dogecoin, litecoin) - default: bitcoin
    CHAINCP_INTERVAL: Blocks between difficulty adjustments - default: network value
    CHAINCP_MIN_AGE_SECS: Minimum checkpoint age in seconds - default: 604800 (one week)
    CHAINCP_SPOT_CHECK: Post-build spot check "TIMESTAMP:HEIGHT:HASH" - default: none
"""

import os
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .errors import ConfigError

ONE_WEEK_SECS = 86400 * 7
DEFAULT_NETWORK = "bitcoin"


@dataclass(frozen=True)
class SpotCheck:
    """
    Known checkpoint verified against a freshly written file.

    The checkpoint at or before `timestamp` must be at `height` with `hash_hex`.
    """
    timestamp: int
    height: int
    hash_hex: str

    @classmethod
    def parse(cls, value: str) -> "SpotCheck":
        """Parse "TIMESTAMP:HEIGHT:HASH"."""
        parts = value.strip().split(":")
        if len(parts) != 3:
            raise ConfigError(f"Spot check must be TIMESTAMP:HEIGHT:HASH, got {value!r}")
        try:
            timestamp, height = int(parts[0]), int(parts[1])
        except ValueError:
            raise ConfigError(f"Spot check timestamp and height must be integers: {value!r}")
        hash_hex = parts[2].lower()
        try:
            raw = bytes.fromhex(hash_hex)
        except ValueError:
            raw = b""
        if len(raw) != 32:
            raise ConfigError(f"Spot check hash must be 64 hex characters: {value!r}")
        return cls(timestamp=timestamp, height=height, hash_hex=hash_hex)


@dataclass(frozen=True)
class NetworkParams:
    """
    Consensus-derived checkpoint policy inputs.

    Fields:
        name: Network identifier
        interval: Blocks between difficulty adjustment boundaries
        min_age_secs: How old a block must be before it may be checkpointed
        spot_check: Optional spot check verified after each build
    """
    name: str
    interval: int
    min_age_secs: int = ONE_WEEK_SECS
    spot_check: Optional[SpotCheck] = None

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval}")
        if self.min_age_secs < 0:
            raise ConfigError(f"min_age_secs must not be negative, got {self.min_age_secs}")


NETWORKS: Dict[str, NetworkParams] = {
    "bitcoin": NetworkParams(name="bitcoin", interval=2016),
    "testnet": NetworkParams(name="testnet", interval=2016),
    "regtest": NetworkParams(name="regtest", interval=2016),
    # Shorter retarget period; a week is still deep enough
    "dogecoin": NetworkParams(name="dogecoin", interval=240),
    "litecoin": NetworkParams(name="litecoin", interval=2016),
}


def _env_int(key: str, allow_zero: bool = False) -> Optional[int]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    if parsed > 0 or (allow_zero and parsed == 0):
        return parsed
    return None


def get_network(name: str) -> NetworkParams:
    try:
        return NETWORKS[name]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise ConfigError(f"Unknown network {name!r} (known: {known})")


def load_params(
    network: Optional[str] = None,
    interval: Optional[int] = None,
    min_age_secs: Optional[int] = None,
    spot_check: Optional[SpotCheck] = None,
) -> NetworkParams:
    """
    Resolve network parameters.

    Args:
        network: Network name (overrides CHAINCP_NETWORK)
        interval: Interval override (overrides CHAINCP_INTERVAL)
        min_age_secs: Minimum age override (overrides CHAINCP_MIN_AGE_SECS)
        spot_check: Spot check override (overrides CHAINCP_SPOT_CHECK)

    Returns:
        NetworkParams

    Raises:
        ConfigError: On unknown network or invalid values
    """
    name = network or os.getenv("CHAINCP_NETWORK") or DEFAULT_NETWORK
    params = get_network(name)

    if interval is None:
        interval = _env_int("CHAINCP_INTERVAL")
    if min_age_secs is None:
        min_age_secs = _env_int("CHAINCP_MIN_AGE_SECS", allow_zero=True)
    if spot_check is None:
        raw = os.getenv("CHAINCP_SPOT_CHECK")
        if raw:
            spot_check = SpotCheck.parse(raw)

    changes = {}
    if interval is not None:
        changes["interval"] = interval
    if min_age_secs is not None:
        changes["min_age_secs"] = min_age_secs
    if spot_check is not None:
        changes["spot_check"] = spot_check

    return replace(params, **changes) if changes else params
