"""
chaincp CLI - Checkpoint file builder

Commands:
- chaincp build - Sync headers, select checkpoints, write the checkpoints file
- chaincp file show/before/digest - Inspect an existing checkpoints file
- chaincp version - Version information
"""

__version__ = "0.1.0"
