"""
Logging configuration for chaincp.

Logs go to stderr so stdout only carries command results (digest, JSON).

Environment Variables:
    CHAINCP_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    CHAINCP_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from chaincp.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, network="bitcoin")
    logger.info("Checkpoints written")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger


class NetworkFilter(logging.Filter):
    """
    Logging filter that adds network to all log records.

    Ensures every record has a network field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "network"):
            record.network = "-"  # type: ignore
        return True


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logger.

    Args:
        level: Overrides CHAINCP_LOG_LEVEL
        log_format: Overrides CHAINCP_LOG_FORMAT
    """
    log_level = (level or os.getenv("CHAINCP_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("CHAINCP_LOG_FORMAT", "text")).lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    resolved = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(NetworkFilter())

    if log_format == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(network)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [network=%(network)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, network: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger that tags records with the network being checkpointed.

    Args:
        name: Logger name (typically __name__)
        network: Network name

    Returns:
        LoggerAdapter with network in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"network": network or "-"})
