"""
Chain Checkpoint Builder

Selects difficulty-interval checkpoint headers from a synced best chain and
writes them to a compact, digest-protected checkpoints file.
"""

__version__ = "0.1.0"
