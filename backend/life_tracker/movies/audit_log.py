from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from life_tracker.config import settings
from life_tracker.movies.entities import Dataset, LogEvent


@dataclass(frozen=True)
class DayGroup:
    # None collects events whose time cannot be placed on a calendar.
    day: Optional[date]
    label: str
    events: tuple[LogEvent, ...]


class AuditLog:
    """Append-only view over `Dataset.logs` (most recent event first)."""

    def __init__(self, dataset: Dataset) -> None:
        self._dataset = dataset

    def record(self, event: LogEvent) -> None:
        # Never merged or deduplicated.
        self._dataset.logs.insert(0, event)

    @property
    def events(self) -> tuple[LogEvent, ...]:
        return tuple(self._dataset.logs)

    def __len__(self) -> int:
        return len(self._dataset.logs)


def to_datetime(ts: Optional[int], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """`None` for a missing timestamp or one outside the platform's datetime range."""
    if ts is None:
        return None
    try:
        return datetime.fromtimestamp(ts / 1000, tz=tz)
    except (OverflowError, OSError, ValueError):
        return None


def event_day(event: LogEvent, tz: Optional[tzinfo] = None) -> Optional[date]:
    moment = to_datetime(event.log_time, tz)
    return moment.date() if moment is not None else None


def format_day(day: Optional[date]) -> str:
    if day is None:
        return str(settings.EMPTY_PLACEHOLDER)
    return day.strftime(str(settings.DATE_FORMAT))


def group_by_day(logs: Iterable[LogEvent], tz: Optional[tzinfo] = None) -> list[DayGroup]:
    """Group events by calendar day.

    Days appear in the order they are first met and events keep log order, so
    a head-inserted log renders as a stable newest-first timeline. `tz`
    defaults to the local zone.
    """
    buckets: dict[Optional[date], list[LogEvent]] = {}
    for event in logs:
        buckets.setdefault(event_day(event, tz), []).append(event)
    return [DayGroup(day=day, label=format_day(day), events=tuple(events)) for day, events in buckets.items()]


__all__ = ["AuditLog", "DayGroup", "event_day", "format_day", "group_by_day", "to_datetime"]
