from __future__ import annotations

from datetime import tzinfo
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from life_tracker.config import settings
from life_tracker.movies.audit_log import DayGroup, to_datetime
from life_tracker.movies.entities import Entry, LogEvent
from life_tracker.movies.facets import FacetField
from life_tracker.movies.session import TrackerSession


class ViewMode(str, Enum):
    """Exactly one of these is active at a time."""

    LIST = "list"
    WATCHED = "watched"
    LOG = "log"


class MovieCardView(BaseModel):
    id: str
    title: str
    platform: str
    language: str
    badge: str
    added_on: str
    watched_on: Optional[str] = None
    cast: list[str] = Field(default_factory=list)


class LogEventView(BaseModel):
    id: str
    title: str
    log_type: str
    log_time: int
    time_label: str
    movies_count: int
    badge: str


class DayGroupView(BaseModel):
    day: str
    label: str
    events: list[LogEventView] = Field(default_factory=list)


class ViewModel(BaseModel):
    mode: ViewMode
    items: list[MovieCardView] = Field(default_factory=list)
    groups: list[DayGroupView] = Field(default_factory=list)
    facets: dict[str, list[str]] = Field(default_factory=dict)
    total: int = 0
    empty: bool = True


def _placeholder(value: Optional[str]) -> str:
    value = (value or "").strip()
    return value or str(settings.EMPTY_PLACEHOLDER)


def format_date(ts: Optional[int], tz: Optional[tzinfo] = None) -> str:
    moment = to_datetime(ts, tz) if ts else None
    if moment is None:
        return str(settings.EMPTY_PLACEHOLDER)
    return moment.strftime(str(settings.DATE_FORMAT))


def format_time(ts: Optional[int], tz: Optional[tzinfo] = None) -> str:
    moment = to_datetime(ts, tz)
    return moment.strftime("%H:%M") if moment is not None else str(settings.EMPTY_PLACEHOLDER)


def _badge(platform: str, language: str) -> str:
    return f"{_placeholder(platform)} · {_placeholder(language)}"


def movie_card(entry: Entry, tz: Optional[tzinfo] = None) -> MovieCardView:
    return MovieCardView(
        id=entry.id,
        title=entry.name.strip() or str(settings.UNTITLED_PLACEHOLDER),
        platform=_placeholder(entry.platform),
        language=_placeholder(entry.language),
        badge=_badge(entry.platform, entry.language),
        added_on=format_date(entry.created_at, tz),
        watched_on=format_date(entry.watched_at, tz) if entry.watched_at else None,
        cast=list(entry.cast),
    )


def log_event_view(event: LogEvent, tz: Optional[tzinfo] = None) -> LogEventView:
    return LogEventView(
        id=event.id,
        title=event.name.strip() or str(settings.UNTITLED_PLACEHOLDER),
        log_type=event.log_type.value,
        log_time=event.log_time,
        time_label=format_time(event.log_time, tz),
        movies_count=event.movies_count,
        badge=_badge(event.platform, event.language),
    )


def day_group_view(group: DayGroup, tz: Optional[tzinfo] = None) -> DayGroupView:
    return DayGroupView(
        day=group.day.isoformat() if group.day is not None else "",
        label=group.label,
        events=[log_event_view(ev, tz) for ev in group.events],
    )


def render_list(
    session: TrackerSession,
    *,
    q: str = "",
    facet_field: Optional[str] = None,
    facet_value: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> ViewModel:
    items = [movie_card(e, tz) for e in session.search(q, facet_field, facet_value)]
    facets = {f.value: session.facets(f.value) for f in FacetField}
    return ViewModel(mode=ViewMode.LIST, items=items, facets=facets, total=len(items), empty=not items)


def render_watched(session: TrackerSession, *, tz: Optional[tzinfo] = None, **_: object) -> ViewModel:
    items = [movie_card(e, tz) for e in session.watched()]
    return ViewModel(mode=ViewMode.WATCHED, items=items, total=len(items), empty=not items)


def render_log(session: TrackerSession, *, tz: Optional[tzinfo] = None, **_: object) -> ViewModel:
    groups = [day_group_view(g, tz) for g in session.logs_by_day(tz=tz)]
    total = sum(len(g.events) for g in groups)
    return ViewModel(mode=ViewMode.LOG, groups=groups, total=total, empty=total == 0)


_RENDERERS: dict[ViewMode, Callable[..., ViewModel]] = {
    ViewMode.LIST: render_list,
    ViewMode.WATCHED: render_watched,
    ViewMode.LOG: render_log,
}


def render_view(session: TrackerSession, mode: ViewMode | str, **kwargs: object) -> ViewModel:
    """Render the active view. Filters only apply to the list view."""
    return _RENDERERS[ViewMode(mode)](session, **kwargs)
