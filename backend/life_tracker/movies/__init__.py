"""Movie tracking core: entities, schema migration, filtering, lifecycle and audit log."""

from life_tracker.movies.audit_log import AuditLog, DayGroup, group_by_day
from life_tracker.movies.entities import Dataset, Entry, LogEvent, LogType, MovieDraft
from life_tracker.movies.errors import (
    FolderStoreError,
    ImportFormatError,
    LifeTrackerError,
    NotFoundError,
    StorageCorruptError,
    ValidationError,
)
from life_tracker.movies.facets import FacetField, facet_values
from life_tracker.movies.filters import query
from life_tracker.movies.lifecycle import LifecycleEngine
from life_tracker.movies.schema import normalize
from life_tracker.movies.session import TrackerSession

__all__ = [
    "AuditLog",
    "Dataset",
    "DayGroup",
    "Entry",
    "FacetField",
    "FolderStoreError",
    "ImportFormatError",
    "LifeTrackerError",
    "LifecycleEngine",
    "LogEvent",
    "LogType",
    "MovieDraft",
    "NotFoundError",
    "StorageCorruptError",
    "TrackerSession",
    "ValidationError",
    "facet_values",
    "group_by_day",
    "normalize",
    "query",
]
