"""Snapshot storage and score export."""

from .db import SnapshotStore
from .export import export_csv, export_json

__all__ = [
    "SnapshotStore",
    "export_csv",
    "export_json",
]
