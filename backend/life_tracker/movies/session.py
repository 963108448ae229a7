from __future__ import annotations

import logging
from typing import Callable, Optional

from life_tracker.config import settings
from life_tracker.movies import schema
from life_tracker.movies.audit_log import DayGroup, group_by_day
from life_tracker.movies.entities import Dataset, Entry, LogEvent
from life_tracker.movies.errors import FolderStoreError, ImportFormatError, NotFoundError, StorageCorruptError
from life_tracker.movies.facets import facet_values
from life_tracker.movies.filters import query
from life_tracker.movies.lifecycle import DraftLike, LifecycleEngine
from life_tracker.ports import FolderStore, KeyValueStore
from life_tracker.utils.log_format import format_kv

logger = logging.getLogger(__name__)


class TrackerSession:
    """Single owner of the in-memory `Dataset`.

    Loads it from the key-value store, persists it after every mutation and
    replaces it wholesale on import. `NotFoundError` is absorbed here: the
    lifecycle methods return `None` for ids that are not in the expected list.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        folder: Optional[FolderStore] = None,
        storage_key: Optional[str] = None,
        clock: Callable[[], int] = schema.now_ms,
        id_factory: Callable[[], str] = schema.new_entry_id,
    ) -> None:
        self._store = store
        self._folder = folder
        self._key = storage_key or str(settings.STORAGE_KEY)
        self._clock = clock
        self._id_factory = id_factory
        self._dataset = self._load()
        self._engine = self._build_engine()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> Dataset:
        raw = self._store.get(self._key)
        if raw is None:
            dataset = schema.default_dataset(now=self._clock())
            logger.info(format_kv(event="storage_initialized", key=self._key, movies_count=len(dataset.to_watch)))
            self._write(dataset)
            return dataset
        try:
            return schema.from_blob(raw)
        except StorageCorruptError as exc:
            logger.warning(format_kv(event="storage_reset", key=self._key, reason=str(exc)))
            dataset = schema.default_dataset(now=self._clock())
            # Overwrite the corrupt value so the next boot is clean.
            self._write(dataset)
            return dataset

    def _write(self, dataset: Dataset) -> None:
        self._store.set(self._key, schema.dumps(dataset))

    def _build_engine(self) -> LifecycleEngine:
        return LifecycleEngine(
            self._dataset,
            on_commit=self._write,
            clock=self._clock,
            id_factory=self._id_factory,
        )

    def _replace(self, dataset: Dataset) -> None:
        # Persist first; the in-memory dataset only changes once storage agrees.
        self._write(dataset)
        self._dataset = dataset
        self._engine = self._build_engine()

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add_movie(self, draft: DraftLike) -> Entry:
        return self._engine.create(draft)

    def edit_movie(self, entry_id: str, draft: DraftLike) -> Optional[Entry]:
        try:
            return self._engine.update(entry_id, draft)
        except NotFoundError as exc:
            logger.info(format_kv(event="edit_ignored", reason=str(exc)))
            return None

    def mark_watched(self, entry_id: str) -> Optional[Entry]:
        try:
            return self._engine.mark_watched(entry_id)
        except NotFoundError as exc:
            logger.info(format_kv(event="watch_ignored", reason=str(exc)))
            return None

    def mark_unwatched(self, entry_id: str) -> Optional[Entry]:
        try:
            return self._engine.mark_unwatched(entry_id)
        except NotFoundError as exc:
            logger.info(format_kv(event="unwatch_ignored", reason=str(exc)))
            return None

    def delete_watched(self, entry_id: str) -> Optional[LogEvent]:
        try:
            return self._engine.delete_watched(entry_id)
        except NotFoundError as exc:
            logger.info(format_kv(event="delete_ignored", reason=str(exc)))
            return None

    def delete_movie(self, entry_id: str) -> Optional[LogEvent]:
        try:
            return self._engine.delete_to_watch(entry_id)
        except NotFoundError as exc:
            logger.info(format_kv(event="delete_ignored", reason=str(exc)))
            return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(
        self,
        free_text: str = "",
        facet_field: Optional[str] = None,
        facet_value: Optional[str] = None,
    ) -> list[Entry]:
        return query(self._dataset.to_watch, free_text, facet_field, facet_value)

    def facets(self, field: str) -> list[str]:
        return facet_values(field, self._dataset.to_watch)

    def watched(self) -> list[Entry]:
        return sorted(self._dataset.watched, key=lambda e: e.watched_at or 0, reverse=True)

    def logs(self) -> list[LogEvent]:
        return list(self._dataset.logs)

    def logs_by_day(self, tz=None) -> list[DayGroup]:
        return group_by_day(self._dataset.logs, tz=tz)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_json(self) -> str:
        return schema.dumps(self._dataset, pretty=True)

    def import_json(self, raw: schema.RawBlob) -> Dataset:
        """Replace the whole dataset. Raises `ImportFormatError`; state is untouched on failure."""
        dataset = schema.from_import(raw)
        self._replace(dataset)
        logger.info(
            format_kv(
                event="dataset_imported",
                movies_count=len(dataset.to_watch),
                watched_count=len(dataset.watched),
                logs_count=len(dataset.logs),
            )
        )
        return dataset

    # ------------------------------------------------------------------
    # Folder save / load
    # ------------------------------------------------------------------

    @property
    def folder_available(self) -> bool:
        return self._folder is not None and self._folder.is_available()

    def _require_folder(self) -> FolderStore:
        if self._folder is None or not self._folder.is_available():
            raise FolderStoreError("Please select a storage folder first.")
        return self._folder

    def save_to_folder(self) -> str:
        folder = self._require_folder()
        filename = str(settings.FOLDER_FILENAME)
        try:
            folder.write_text(filename, schema.folder_payload(self._dataset))
        except OSError as exc:
            logger.exception(format_kv(event="folder_save_failed", filename=filename))
            raise FolderStoreError(f"Failed to save {filename}: {exc}") from exc
        logger.info(format_kv(event="folder_saved", filename=filename, movies_count=len(self._dataset.to_watch)))
        return filename

    def load_from_folder(self) -> list[Entry]:
        """Replace the to-watch list from the folder file.

        Entries already on the watched list are skipped. Any failure leaves the
        dataset untouched.
        """
        folder = self._require_folder()
        filename = str(settings.FOLDER_FILENAME)
        try:
            text = folder.read_text(filename)
        except FileNotFoundError as exc:
            raise FolderStoreError(f"{filename} does not exist in the selected folder") from exc
        except OSError as exc:
            logger.exception(format_kv(event="folder_load_failed", filename=filename))
            raise FolderStoreError(f"Failed to read {filename}: {exc}") from exc
        try:
            movies = schema.parse_folder_movies(text)
        except ImportFormatError as exc:
            raise FolderStoreError(str(exc)) from exc

        watched_ids = {e.id for e in self._dataset.watched}
        to_watch = [e for e in movies if e.id not in watched_ids]
        skipped = len(movies) - len(to_watch)
        current = self._dataset
        self._replace(
            Dataset(
                to_watch=to_watch,
                watched=current.watched,
                logs=current.logs,
                exercises=current.exercises,
                recipes=current.recipes,
            )
        )
        logger.info(format_kv(event="folder_loaded", filename=filename, movies_count=len(to_watch), skipped=skipped))
        return to_watch


__all__ = ["TrackerSession"]
