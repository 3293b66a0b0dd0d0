"""Snapshot exports."""

from .data_snapshots import DataSnapshot, ExistingDataSnapshot, wrap_snapshot
from .snapshot_reading import listen, read_snapshot

__all__ = [
    "DataSnapshot",
    "ExistingDataSnapshot",
    "listen",
    "read_snapshot",
    "wrap_snapshot",
]
