from __future__ import annotations

import json
import logging
import math
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

import yaml

from life_tracker.config import settings
from life_tracker.movies.entities import Dataset, Entry, LogEvent, LogType
from life_tracker.movies.errors import ImportFormatError, LifeTrackerError, StorageCorruptError
from life_tracker.utils.log_format import format_kv

logger = logging.getLogger(__name__)

SOURCE_LOAD = "load"
SOURCE_IMPORT = "import"

# Wire name -> Dataset attribute.
COLLECTION_FIELDS: dict[str, str] = {
    "movies": "to_watch",
    "watchedMovies": "watched",
    "movieLogs": "logs",
    "exercises": "exercises",
    "recipes": "recipes",
}

_ENTRY_KEYS = frozenset({"id", "name", "language", "platform", "cast", "createdAt", "watchedAt"})
_LOG_KEYS = _ENTRY_KEYS | {"logType", "logTime", "moviesCount"}

RawBlob = Union[str, bytes, bytearray, Mapping[str, Any]]

# Epoch ms that `datetime.fromtimestamp` renders in any zone (1970-01-01 .. 9999-12-30).
MIN_TIMESTAMP_MS = 0
MAX_TIMESTAMP_MS = 253_402_128_000_000


def now_ms() -> int:
    return int(time.time() * 1000)


def new_entry_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value.strip())
    except (OverflowError, ValueError):
        return None
    return None


def _as_timestamp(value: Any) -> Optional[int]:
    ts = _as_int(value)
    if ts is None or not MIN_TIMESTAMP_MS <= ts <= MAX_TIMESTAMP_MS:
        return None
    return ts


def clean_cast(value: Any) -> list[str]:
    """Trim cast members and drop blanks. A plain string is split on commas."""
    if isinstance(value, str):
        members: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        members = list(value)
    else:
        return []
    out: list[str] = []
    for member in members:
        if not isinstance(member, str):
            continue
        member = member.strip()
        if member:
            out.append(member)
    return out


def _extra_fields(raw: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if k not in known}


def _coerce_entry_fields(raw: Mapping[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Shared Entry/LogEvent field parsing.

    Values that cannot be coerced are moved to `extra` under their wire name so
    a later export writes them back untouched.
    """
    fields: dict[str, Any] = {}

    raw_id = raw.get("id")
    entry_id = raw_id.strip() if isinstance(raw_id, str) else ""
    if not entry_id:
        entry_id = new_entry_id()
        logger.warning(format_kv(event="entry_id_assigned", entry_id=entry_id, name=raw.get("name")))
    fields["id"] = entry_id

    for wire_key, attr in (("name", "name"), ("language", "language"), ("platform", "platform")):
        text = _as_text(raw.get(wire_key))
        if text is None:
            extra[wire_key] = raw.get(wire_key)
            text = ""
        fields[attr] = text

    raw_cast = raw.get("cast")
    fields["cast"] = clean_cast(raw_cast)
    if raw_cast is not None and not isinstance(raw_cast, (list, tuple, str)):
        extra["cast"] = raw_cast

    for wire_key, attr in (("createdAt", "created_at"), ("watchedAt", "watched_at")):
        value = raw.get(wire_key)
        ts = _as_timestamp(value)
        if ts is None and value is not None:
            extra[wire_key] = value
        fields[attr] = ts
    return fields


def entry_from_dict(raw: Mapping[str, Any]) -> Entry:
    extra = _extra_fields(raw, _ENTRY_KEYS)
    fields = _coerce_entry_fields(raw, extra)
    return Entry(extra=extra, **fields)


def log_event_from_dict(raw: Mapping[str, Any]) -> LogEvent:
    """Raises `ValueError` for an unknown `logType`."""
    extra = _extra_fields(raw, _LOG_KEYS)
    fields = _coerce_entry_fields(raw, extra)
    log_type = LogType(str(raw.get("logType") or ""))
    raw_log_time = raw.get("logTime")
    log_time = _as_timestamp(raw_log_time)
    if log_time is None:
        if raw_log_time is not None:
            extra["logTime"] = raw_log_time
        log_time = fields.get("watched_at") or fields.get("created_at") or 0
    raw_count = raw.get("moviesCount")
    movies_count = _as_int(raw_count)
    if movies_count is None or movies_count < 0:
        if raw_count is not None:
            extra["moviesCount"] = raw_count
        movies_count = 0
    return LogEvent(
        id=fields["id"],
        name=fields["name"],
        language=fields["language"],
        platform=fields["platform"],
        cast=tuple(fields["cast"]),
        created_at=fields["created_at"],
        watched_at=fields["watched_at"],
        log_type=log_type,
        log_time=int(log_time),
        movies_count=int(movies_count),
        extra=extra,
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _fields_to_dict(item: Union[Entry, LogEvent]) -> dict[str, Any]:
    data: dict[str, Any] = dict(item.extra)
    data["id"] = item.id
    # A wire value that could not be parsed sits in `extra` and is written back as is.
    for wire_key, value in (
        ("name", item.name),
        ("language", item.language),
        ("platform", item.platform),
        ("cast", list(item.cast)),
    ):
        if wire_key not in item.extra:
            data[wire_key] = value
    if item.created_at is not None:
        data["createdAt"] = item.created_at
    if item.watched_at is not None:
        data["watchedAt"] = item.watched_at
    return data


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    return _fields_to_dict(entry)


def log_event_to_dict(event: LogEvent) -> dict[str, Any]:
    data = _fields_to_dict(event)
    data["logType"] = event.log_type.value
    for wire_key, value in (("logTime", event.log_time), ("moviesCount", event.movies_count)):
        if wire_key not in event.extra:
            data[wire_key] = value
    return data


def serialize(dataset: Dataset) -> dict[str, Any]:
    return {
        "movies": [entry_to_dict(e) for e in dataset.to_watch],
        "watchedMovies": [entry_to_dict(e) for e in dataset.watched],
        "movieLogs": [log_event_to_dict(ev) for ev in dataset.logs],
        "exercises": list(dataset.exercises),
        "recipes": list(dataset.recipes),
    }


def dumps(dataset: Dataset, *, pretty: bool = False) -> str:
    indent = int(settings.EXPORT_INDENT) if pretty else None
    return json.dumps(serialize(dataset), ensure_ascii=False, indent=indent)


def folder_payload(dataset: Dataset) -> str:
    """The narrow `{movies: [...]}` document written to a user folder."""
    payload = {"movies": [entry_to_dict(e) for e in dataset.to_watch]}
    return json.dumps(payload, ensure_ascii=False, indent=int(settings.EXPORT_INDENT))


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def detect_schema_version(data: Mapping[str, Any]) -> int:
    """v1 blobs predate the watched list and the audit log."""
    if "watchedMovies" in data or "movieLogs" in data:
        return 2
    return 1


def _decode(raw: RawBlob, error_cls: type[LifeTrackerError]) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise error_cls(f"blob is not valid UTF-8: {exc}") from exc
    if not isinstance(raw, str):
        raise error_cls(f"unsupported blob type: {type(raw).__name__}")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise error_cls(f"blob is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise error_cls("blob must be a JSON object")
    return data


def parse_blob(raw: RawBlob) -> Mapping[str, Any]:
    return _decode(raw, StorageCorruptError)


def parse_import(raw: RawBlob) -> Mapping[str, Any]:
    return _decode(raw, ImportFormatError)


def _collection(data: Mapping[str, Any], wire_key: str) -> list[Any]:
    value = data.get(wire_key)
    return list(value) if isinstance(value, list) else []


def _parse_items(
    items: list[Any],
    wire_key: str,
    parse: Callable[[Mapping[str, Any]], Any],
    source: str,
) -> list[Any]:
    out: list[Any] = []
    for index, item in enumerate(items):
        if isinstance(item, Mapping):
            try:
                out.append(parse(item))
                continue
            except ValueError as exc:
                reason = str(exc)
        else:
            reason = f"expected object, got {type(item).__name__}"
        if source == SOURCE_IMPORT:
            raise ImportFormatError(f"{wire_key}[{index}]: {reason}")
        logger.warning(format_kv(event="item_skipped", collection=wire_key, index=index, reason=reason))
    return out


def _dedupe_ids(to_watch: list[Entry], watched: list[Entry]) -> tuple[list[Entry], list[Entry]]:
    """Keep every id in at most one live collection; watched wins."""
    seen: set[str] = set()
    kept_watched: list[Entry] = []
    for entry in watched:
        if entry.id in seen:
            logger.warning(format_kv(event="duplicate_dropped", collection="watchedMovies", entry_id=entry.id))
            continue
        seen.add(entry.id)
        kept_watched.append(entry)
    kept_to_watch: list[Entry] = []
    for entry in to_watch:
        if entry.id in seen:
            logger.warning(format_kv(event="duplicate_dropped", collection="movies", entry_id=entry.id))
            continue
        seen.add(entry.id)
        kept_to_watch.append(entry)
    return kept_to_watch, kept_watched


def _build(data: Mapping[str, Any], source: str) -> Dataset:
    to_watch = _parse_items(_collection(data, "movies"), "movies", entry_from_dict, source)
    watched = _parse_items(_collection(data, "watchedMovies"), "watchedMovies", entry_from_dict, source)
    logs = _parse_items(_collection(data, "movieLogs"), "movieLogs", log_event_from_dict, source)
    to_watch, watched = _dedupe_ids(to_watch, watched)
    return Dataset(
        to_watch=to_watch,
        watched=watched,
        logs=logs,
        exercises=_collection(data, "exercises"),
        recipes=_collection(data, "recipes"),
    )


def from_blob(raw: RawBlob) -> Dataset:
    """Strict load of a stored blob. Raises `StorageCorruptError`."""
    data = parse_blob(raw)
    version = detect_schema_version(data)
    if version < int(settings.SCHEMA_VERSION):
        logger.info(format_kv(event="schema_migrated", from_version=version, to_version=settings.SCHEMA_VERSION))
    return _build(data, SOURCE_LOAD)


def from_import(raw: RawBlob) -> Dataset:
    """Parse an export file. Raises `ImportFormatError`; unknown top-level keys are dropped."""
    return _build(parse_import(raw), SOURCE_IMPORT)


def normalize(raw: Optional[RawBlob], *, source: str = SOURCE_LOAD, now: Optional[int] = None) -> Dataset:
    """Total normalization into the current `Dataset` shape.

    On the load path a missing or unparseable blob yields the default dataset;
    the caller is expected to persist it. The import path raises
    `ImportFormatError` instead, since the user has to be told.
    """
    if source == SOURCE_IMPORT:
        if raw is None:
            raise ImportFormatError("empty import")
        return from_import(raw)
    if raw is None:
        return default_dataset(now=now)
    try:
        return from_blob(raw)
    except StorageCorruptError as exc:
        logger.warning(format_kv(event="storage_corrupt", reason=str(exc)))
        return default_dataset(now=now)


def parse_folder_movies(raw: RawBlob) -> list[Entry]:
    """Parse the folder file; requires a `movies` list."""
    data = parse_import(raw)
    movies = data.get("movies")
    if not isinstance(movies, list):
        raise ImportFormatError(f"{settings.FOLDER_FILENAME} has no movies list")
    entries = _parse_items(movies, "movies", entry_from_dict, SOURCE_IMPORT)
    entries, _ = _dedupe_ids(entries, [])
    return entries


# ---------------------------------------------------------------------------
# Default dataset
# ---------------------------------------------------------------------------


def _load_seed(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return data if isinstance(data, dict) else {}


def default_dataset(*, now: Optional[int] = None) -> Dataset:
    """The fresh-install dataset (sample movies unless disabled)."""
    now = now_ms() if now is None else int(now)
    if not settings.SEED_SAMPLE_MOVIES:
        return Dataset()

    seed = _load_seed(Path(settings.DEFAULT_DATASET_PATH))
    to_watch: list[Entry] = []
    for item in seed.get("movies") or []:
        if not isinstance(item, dict) or not str(item.get("name") or "").strip():
            continue
        offset_s = _as_int(item.get("created_offset_s")) or 0
        to_watch.append(
            Entry(
                id=new_entry_id(),
                name=str(item["name"]).strip(),
                language=str(item.get("language") or "").strip(),
                platform=str(item.get("platform") or "").strip(),
                cast=clean_cast(item.get("cast")),
                created_at=now - offset_s * 1000,
            )
        )
    return Dataset(
        to_watch=to_watch,
        exercises=list(seed.get("exercises") or []),
        recipes=list(seed.get("recipes") or []),
    )


__all__ = [
    "COLLECTION_FIELDS",
    "SOURCE_IMPORT",
    "SOURCE_LOAD",
    "clean_cast",
    "default_dataset",
    "detect_schema_version",
    "dumps",
    "entry_from_dict",
    "entry_to_dict",
    "folder_payload",
    "from_blob",
    "from_import",
    "log_event_from_dict",
    "log_event_to_dict",
    "new_entry_id",
    "normalize",
    "now_ms",
    "parse_blob",
    "parse_folder_movies",
    "parse_import",
    "serialize",
]
