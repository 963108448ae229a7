"""Storage factory: picks the key-value backend from infrastructure settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from infrastructure.config.settings import TRACKER_DATA_DIR, TRACKER_FOLDER_DIR, TRACKER_STORAGE_BACKEND
from infrastructure.persistence.local.folder_store import LocalFolderStore
from infrastructure.persistence.local.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from life_tracker.ports import KeyValueStore

logger = logging.getLogger(__name__)

BackendType = Literal["file", "memory", ""]


class StorageFactory:
    @staticmethod
    def create(backend: BackendType | None = None, *, data_dir: Optional[Path] = None) -> KeyValueStore:
        """Create a key-value store for the given backend ('file' or 'memory').

        Raises:
            ValueError: If an unsupported backend is specified.
        """
        if backend is None:
            backend = TRACKER_STORAGE_BACKEND  # type: ignore[assignment]

        backend = (backend or "").strip().lower()

        match backend:
            case "file" | "":
                root = data_dir or TRACKER_DATA_DIR
                logger.info("tracker storage: file backend at %s", root)
                return JsonFileKeyValueStore(root)
            case "memory":
                logger.warning("tracker storage: in-memory backend, data is lost on restart")
                return InMemoryKeyValueStore()
            case _:
                raise ValueError(
                    f"Unsupported TRACKER_STORAGE_BACKEND: {backend!r}. "
                    f"Supported values: 'file', 'memory'"
                )


def create_folder_store(directory: Optional[Path] = None) -> LocalFolderStore:
    return LocalFolderStore(directory or TRACKER_FOLDER_DIR)
