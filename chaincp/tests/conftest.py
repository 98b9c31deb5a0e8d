import logging
import os

import pytest

from chaincp.logging_config import NetworkFilter


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop handlers installed by setup_logging() after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if any(isinstance(f, NetworkFilter) for f in handler.filters):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def umask_022():
    old = os.umask(0o022)
    yield
    os.umask(old)
