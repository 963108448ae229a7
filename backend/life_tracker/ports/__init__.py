"""Ports for core dependencies (durable key-value storage, user folder files)."""

from life_tracker.ports.folder import FolderStore
from life_tracker.ports.storage import KeyValueStore

__all__ = [
    "FolderStore",
    "KeyValueStore",
]
