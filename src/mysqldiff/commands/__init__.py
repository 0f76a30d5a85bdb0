"""
mysqldiff CLI Commands

Each command lives in its own module; cli.py only routes arguments.
"""

from .diff import fetch_snapshots, generate_migration, resolve_snapshot
from .snapshot import dump_snapshot

__all__ = [
    "generate_migration",
    "fetch_snapshots",
    "resolve_snapshot",
    "dump_snapshot",
]
