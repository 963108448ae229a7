from __future__ import annotations

from typing import Iterable, Optional

from life_tracker.movies.entities import Entry
from life_tracker.movies.facets import FacetField, facet_raw_values, parse_facet_field


def search_text(entry: Entry) -> str:
    """Haystack for free-text search: name, language, platform and cast."""
    parts = [entry.name, entry.language, entry.platform, *entry.cast]
    return " ".join(str(p) for p in parts if p).casefold()


def matches_text(entry: Entry, free_text: str) -> bool:
    needle = (free_text or "").strip().casefold()
    if not needle:
        return True
    return needle in search_text(entry)


def matches_facet(entry: Entry, field: Optional[FacetField], value: Optional[str]) -> bool:
    wanted = (value or "").strip().casefold()
    if field is None or not wanted:
        return True
    return any(v.strip().casefold() == wanted for v in facet_raw_values(entry, field))


def query(
    to_watch: Iterable[Entry],
    free_text: str = "",
    facet_field: Optional[str | FacetField] = None,
    facet_value: Optional[str] = None,
) -> list[Entry]:
    """Filter the to-watch list.

    Free text is a case-insensitive substring match; the facet is a
    case-insensitive equality (any cast member for `cast`). Both must hold.
    Results are newest first by `created_at`; entries without a timestamp sort
    last and ties keep their input order.
    """
    field = parse_facet_field(facet_field) if (facet_field or "").strip() else None
    matched = [e for e in to_watch if matches_text(e, free_text) and matches_facet(e, field, facet_value)]
    return sorted(matched, key=lambda e: e.created_at or 0, reverse=True)


__all__ = ["matches_facet", "matches_text", "query", "search_text"]
