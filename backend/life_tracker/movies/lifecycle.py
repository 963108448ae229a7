from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from life_tracker.movies.audit_log import AuditLog
from life_tracker.movies.entities import Dataset, Entry, LogEvent, LogType, MovieDraft
from life_tracker.movies.errors import NotFoundError, ValidationError
from life_tracker.movies.schema import clean_cast, new_entry_id, now_ms
from life_tracker.utils.log_format import format_kv

logger = logging.getLogger(__name__)

CommitHook = Callable[[Dataset], None]
DraftLike = Union[MovieDraft, Mapping[str, Any]]

TO_WATCH = "to_watch"
WATCHED = "watched"


def _coerce_draft(draft: DraftLike) -> MovieDraft:
    if isinstance(draft, MovieDraft):
        return draft
    return MovieDraft.from_form(
        name=str(draft.get("name") or ""),
        language=str(draft.get("language") or ""),
        platform=str(draft.get("platform") or ""),
        cast=draft.get("cast") or "",
    )


def _validated_fields(draft: DraftLike) -> dict[str, Any]:
    d = _coerce_draft(draft)
    name = (d.name or "").strip()
    if not name:
        raise ValidationError("Movie name is required")
    return {
        "name": name,
        "language": (d.language or "").strip(),
        "platform": (d.platform or "").strip(),
        "cast": clean_cast(list(d.cast)),
    }


class LifecycleEngine:
    """State machine moving entries between to-watch, watched and deleted.

    Each transition computes the new collections first, swaps them in together
    with the audit event, then calls `on_commit` (persistence). If the hook
    fails the previous collections and log are put back and the error
    propagates, so callers never observe a half-applied transition.
    """

    def __init__(
        self,
        dataset: Dataset,
        *,
        on_commit: Optional[CommitHook] = None,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_entry_id,
    ) -> None:
        self._dataset = dataset
        self._audit = AuditLog(dataset)
        self._on_commit = on_commit
        self._clock = clock
        self._id_factory = id_factory

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def _require(self, entry_id: str, collection: str) -> Entry:
        if collection == TO_WATCH:
            entry = self._dataset.find_to_watch(entry_id)
        else:
            entry = self._dataset.find_watched(entry_id)
        if entry is None:
            raise NotFoundError(entry_id, collection)
        return entry

    def _commit(
        self,
        *,
        entry: Entry,
        log_type: LogType,
        to_watch: list[Entry],
        watched: list[Entry],
        log_time: int,
    ) -> LogEvent:
        ds = self._dataset
        previous = (ds.to_watch, ds.watched, list(ds.logs))
        event = LogEvent.snapshot(entry, log_type=log_type, log_time=log_time, movies_count=len(to_watch))
        ds.to_watch = to_watch
        ds.watched = watched
        self._audit.record(event)
        try:
            self._persist()
        except Exception:
            ds.to_watch, ds.watched, ds.logs = previous
            raise
        logger.info(
            format_kv(
                event=log_type,
                entry_id=entry.id,
                name=entry.name,
                movies_count=event.movies_count,
                watched_count=len(watched),
            )
        )
        return event

    def _persist(self) -> None:
        if self._on_commit is not None:
            self._on_commit(self._dataset)

    def create(self, draft: DraftLike) -> Entry:
        fields = _validated_fields(draft)
        now = int(self._clock())
        entry = Entry(id=self._id_factory(), created_at=now, **fields)
        self._commit(
            entry=entry,
            log_type=LogType.ADD,
            to_watch=[*self._dataset.to_watch, entry],
            watched=self._dataset.watched,
            log_time=now,
        )
        return entry

    def update(self, entry_id: str, draft: DraftLike) -> Entry:
        """Edit an entry on the to-watch list in place. Edits are not audited."""
        entry = self._require(entry_id, TO_WATCH)
        fields = _validated_fields(draft)
        previous = {key: getattr(entry, key) for key in fields}
        previous_extra = dict(entry.extra)
        for key, value in fields.items():
            setattr(entry, key, value)
            # Edited values replace any unparsed wire value kept for that field.
            entry.extra.pop(key, None)
        try:
            self._persist()
        except Exception:
            for key, value in previous.items():
                setattr(entry, key, value)
            entry.extra = previous_extra
            raise
        logger.info(format_kv(event="Edit", entry_id=entry.id, name=entry.name))
        return entry

    def mark_watched(self, entry_id: str) -> Entry:
        entry = self._require(entry_id, TO_WATCH)
        now = int(self._clock())
        to_watch = [e for e in self._dataset.to_watch if e.id != entry_id]
        previous_watched_at = entry.watched_at
        entry.watched_at = now
        try:
            self._commit(
                entry=entry,
                log_type=LogType.WATCH,
                to_watch=to_watch,
                watched=[*self._dataset.watched, entry],
                log_time=now,
            )
        except Exception:
            entry.watched_at = previous_watched_at
            raise
        return entry

    def mark_unwatched(self, entry_id: str) -> Entry:
        # watched_at is left as is; it is stale until the next watch.
        entry = self._require(entry_id, WATCHED)
        self._commit(
            entry=entry,
            log_type=LogType.UNWATCH,
            to_watch=[*self._dataset.to_watch, entry],
            watched=[e for e in self._dataset.watched if e.id != entry_id],
            log_time=int(self._clock()),
        )
        return entry

    def delete_watched(self, entry_id: str) -> LogEvent:
        entry = self._require(entry_id, WATCHED)
        return self._commit(
            entry=entry,
            log_type=LogType.DELETE,
            to_watch=self._dataset.to_watch,
            watched=[e for e in self._dataset.watched if e.id != entry_id],
            log_time=int(self._clock()),
        )

    def delete_to_watch(self, entry_id: str) -> LogEvent:
        entry = self._require(entry_id, TO_WATCH)
        return self._commit(
            entry=entry,
            log_type=LogType.DELETE,
            to_watch=[e for e in self._dataset.to_watch if e.id != entry_id],
            watched=self._dataset.watched,
            log_time=int(self._clock()),
        )


__all__ = ["LifecycleEngine", "TO_WATCH", "WATCHED"]
