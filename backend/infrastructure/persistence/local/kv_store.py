from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional

from life_tracker.ports import KeyValueStore
from life_tracker.utils.log_format import format_kv

logger = logging.getLogger(__name__)

_UNSAFE_KEY_RE = re.compile(r"[^0-9A-Za-z_.-]+")


def write_text_atomic(path: Path, text: str) -> None:
    """Write via a sibling temp file + os.replace so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """Durable store: one file per key under `root_dir` (`<key>.json`).

    Values are stored verbatim; a file holding invalid JSON is returned as is
    so the caller can detect and repair it.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self._root = Path(root_dir).expanduser()
        self._lock = threading.Lock()

    @property
    def root_dir(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_KEY_RE.sub("_", (key or "").strip()).strip("._")
        if not safe:
            raise ValueError("storage key is required")
        return self._root / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        with self._lock:
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except UnicodeDecodeError:
                logger.warning(format_kv(event="storage_undecodable", path=str(path)))
                return path.read_bytes().decode("utf-8", errors="replace")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        with self._lock:
            write_text_atomic(path, value)
        logger.debug(format_kv(event="storage_written", path=str(path), bytes=len(value)))
