from __future__ import annotations

from pathlib import Path
from typing import Optional

from infrastructure.config.core_settings import apply_core_settings_overrides
from life_tracker.movies.session import TrackerSession


def bootstrap_core_settings() -> None:
    """Inject infrastructure env/path settings into `life_tracker.config.settings`."""
    apply_core_settings_overrides()


def build_tracker_session(
    *,
    backend: Optional[str] = None,
    data_dir: Optional[Path] = None,
    folder_dir: Optional[Path] = None,
) -> TrackerSession:
    """Wire infrastructure stores into a tracker session (loads or seeds the dataset)."""
    bootstrap_core_settings()

    from infrastructure.persistence.local.factory import StorageFactory, create_folder_store

    store = StorageFactory.create(backend, data_dir=data_dir)  # type: ignore[arg-type]
    return TrackerSession(store, folder=create_folder_store(folder_dir))
