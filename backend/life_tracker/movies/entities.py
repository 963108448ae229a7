from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class LogType(str, Enum):
    ADD = "Add"
    WATCH = "Watch"
    UNWATCH = "Unwatch"
    DELETE = "Delete"


@dataclass
class Entry:
    """A tracked movie.

    Timestamps are epoch milliseconds. `extra` carries fields written by other
    versions of the app so that a load/export cycle never loses them.
    """

    id: str
    name: str
    language: str = ""
    platform: str = ""
    cast: list[str] = field(default_factory=list)
    created_at: Optional[int] = None
    # Only set once the entry has been moved to the watched list.
    watched_at: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MovieDraft:
    """User-supplied fields for create/edit."""

    name: str
    language: str = ""
    platform: str = ""
    cast: tuple[str, ...] = ()

    @classmethod
    def from_form(
        cls,
        *,
        name: str,
        language: str = "",
        platform: str = "",
        cast: Any = "",
    ) -> "MovieDraft":
        """Accept cast either as a comma separated string or as a list."""
        if isinstance(cast, str):
            members = cast.split(",")
        else:
            members = list(cast or [])
        return cls(
            name=name or "",
            language=language or "",
            platform=platform or "",
            cast=tuple(str(m) for m in members if m is not None),
        )


@dataclass(frozen=True)
class LogEvent:
    """Immutable snapshot of an entry at the moment of a lifecycle transition."""

    id: str
    name: str
    language: str
    platform: str
    cast: tuple[str, ...]
    created_at: Optional[int]
    watched_at: Optional[int]
    log_type: LogType
    log_time: int
    movies_count: int
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Read-only copy; history never shares a mapping with the live entry.
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def snapshot(
        cls,
        entry: Entry,
        *,
        log_type: LogType,
        log_time: int,
        movies_count: int,
    ) -> "LogEvent":
        return cls(
            id=entry.id,
            name=entry.name,
            language=entry.language,
            platform=entry.platform,
            cast=tuple(entry.cast),
            created_at=entry.created_at,
            watched_at=entry.watched_at,
            log_type=log_type,
            log_time=int(log_time),
            movies_count=int(movies_count),
            extra=entry.extra,
        )


@dataclass
class Dataset:
    """Root aggregate persisted under a single storage key.

    Exercises and recipes are placeholder collections kept verbatim.
    """

    to_watch: list[Entry] = field(default_factory=list)
    watched: list[Entry] = field(default_factory=list)
    # Most recent event first.
    logs: list[LogEvent] = field(default_factory=list)
    exercises: list[Any] = field(default_factory=list)
    recipes: list[Any] = field(default_factory=list)

    def find_to_watch(self, entry_id: str) -> Optional[Entry]:
        return next((e for e in self.to_watch if e.id == entry_id), None)

    def find_watched(self, entry_id: str) -> Optional[Entry]:
        return next((e for e in self.watched if e.id == entry_id), None)
