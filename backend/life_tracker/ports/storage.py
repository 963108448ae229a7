from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Durable string store. The tracker only ever uses a single key."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


__all__ = ["KeyValueStore"]
