from __future__ import annotations

import logging
import threading
from datetime import tzinfo
from typing import Any, Optional

from application.movies.views import ViewMode, ViewModel, render_view
from life_tracker.movies import schema
from life_tracker.movies.entities import MovieDraft
from life_tracker.movies.session import TrackerSession

logger = logging.getLogger(__name__)


class MovieTrackerService:
    """Facade used by the API layer.

    The tracker is single-writer; the lock serializes requests that the
    server may run on worker threads. Entries are returned in their wire
    (export) shape.
    """

    def __init__(self, *, session: TrackerSession, tz: Optional[tzinfo] = None) -> None:
        self._session = session
        self._tz = tz
        self._lock = threading.Lock()

    @property
    def session(self) -> TrackerSession:
        return self._session

    # ----- list / query -----

    def list_movies(
        self,
        *,
        q: str = "",
        facet_field: Optional[str] = None,
        facet_value: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            return [schema.entry_to_dict(e) for e in self._session.search(q, facet_field, facet_value)]

    def list_watched(self) -> list[dict[str, Any]]:
        with self._lock:
            return [schema.entry_to_dict(e) for e in self._session.watched()]

    def list_logs(self) -> list[dict[str, Any]]:
        with self._lock:
            return [schema.log_event_to_dict(ev) for ev in self._session.logs()]

    def facet_values(self, field: str) -> list[str]:
        with self._lock:
            return self._session.facets(field)

    def view(self, mode: ViewMode | str, **filters: Any) -> ViewModel:
        with self._lock:
            return render_view(self._session, mode, tz=self._tz, **filters)

    # ----- lifecycle -----

    def add_movie(self, *, name: str, language: str = "", platform: str = "", cast: Any = "") -> dict[str, Any]:
        draft = MovieDraft.from_form(name=name, language=language, platform=platform, cast=cast)
        with self._lock:
            return schema.entry_to_dict(self._session.add_movie(draft))

    def edit_movie(
        self,
        entry_id: str,
        *,
        name: str,
        language: str = "",
        platform: str = "",
        cast: Any = "",
    ) -> Optional[dict[str, Any]]:
        draft = MovieDraft.from_form(name=name, language=language, platform=platform, cast=cast)
        with self._lock:
            entry = self._session.edit_movie(entry_id, draft)
        return schema.entry_to_dict(entry) if entry is not None else None

    def mark_watched(self, entry_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self._session.mark_watched(entry_id)
        return schema.entry_to_dict(entry) if entry is not None else None

    def mark_unwatched(self, entry_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self._session.mark_unwatched(entry_id)
        return schema.entry_to_dict(entry) if entry is not None else None

    def delete_watched(self, entry_id: str) -> bool:
        with self._lock:
            return self._session.delete_watched(entry_id) is not None

    def delete_movie(self, entry_id: str) -> bool:
        with self._lock:
            return self._session.delete_movie(entry_id) is not None

    # ----- import / export / folder -----

    def export_json(self) -> str:
        with self._lock:
            return self._session.export_json()

    def import_json(self, raw: Any) -> dict[str, int]:
        with self._lock:
            dataset = self._session.import_json(raw)
        return {
            "movies": len(dataset.to_watch),
            "watchedMovies": len(dataset.watched),
            "movieLogs": len(dataset.logs),
        }

    @property
    def folder_available(self) -> bool:
        return self._session.folder_available

    def save_to_folder(self) -> str:
        with self._lock:
            return self._session.save_to_folder()

    def load_from_folder(self) -> int:
        with self._lock:
            return len(self._session.load_from_folder())
