from __future__ import annotations


class LifeTrackerError(Exception):
    """Base class for tracker domain errors."""


class ValidationError(LifeTrackerError):
    """A required field is missing or blank. Nothing was mutated."""


class NotFoundError(LifeTrackerError):
    """The referenced entry id is not in the expected collection."""

    def __init__(self, entry_id: str, collection: str) -> None:
        super().__init__(f"entry {entry_id!r} not found in {collection}")
        self.entry_id = entry_id
        self.collection = collection


class StorageCorruptError(LifeTrackerError):
    """The persisted blob could not be parsed."""


class ImportFormatError(LifeTrackerError):
    """An imported document is not a usable dataset export."""


class FolderStoreError(LifeTrackerError):
    """The folder file could not be read or written."""


__all__ = [
    "LifeTrackerError",
    "ValidationError",
    "NotFoundError",
    "StorageCorruptError",
    "ImportFormatError",
    "FolderStoreError",
]
