from __future__ import annotations

from typing import Protocol


class FolderStore(Protocol):
    """A user-chosen directory the tracker can save/load a named file in.

    Implementations raise `FileNotFoundError` when the file (or the folder)
    does not exist and `OSError` for other I/O failures.
    """

    def is_available(self) -> bool:
        ...

    def read_text(self, filename: str) -> str:
        ...

    def write_text(self, filename: str, contents: str) -> None:
        ...


__all__ = ["FolderStore"]
