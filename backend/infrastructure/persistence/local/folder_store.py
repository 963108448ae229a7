from __future__ import annotations

from pathlib import Path
from typing import Optional

from infrastructure.persistence.local.kv_store import write_text_atomic
from life_tracker.ports import FolderStore


class LocalFolderStore(FolderStore):
    """A directory on the local filesystem chosen by the user (may be unset)."""

    def __init__(self, directory: Optional[Path | str] = None) -> None:
        self._directory = Path(directory).expanduser() if directory else None

    @property
    def directory(self) -> Optional[Path]:
        return self._directory

    def is_available(self) -> bool:
        return self._directory is not None and self._directory.is_dir()

    def _path(self, filename: str) -> Path:
        if self._directory is None:
            raise FileNotFoundError("no folder selected")
        # Only plain file names; the folder is the boundary.
        name = Path(filename).name
        if not name or name != filename:
            raise ValueError(f"invalid file name: {filename!r}")
        return self._directory / name

    def read_text(self, filename: str) -> str:
        return self._path(filename).read_text(encoding="utf-8")

    def write_text(self, filename: str, contents: str) -> None:
        write_text_atomic(self._path(filename), contents)
