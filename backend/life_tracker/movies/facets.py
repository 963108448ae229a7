from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator

from life_tracker.movies.entities import Entry


class FacetField(str, Enum):
    LANGUAGE = "language"
    PLATFORM = "platform"
    CAST = "cast"


def parse_facet_field(field: str | FacetField) -> FacetField:
    if isinstance(field, FacetField):
        return field
    try:
        return FacetField((field or "").strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in FacetField)
        raise ValueError(f"unsupported facet field {field!r} (expected one of {choices})") from None


def facet_raw_values(entry: Entry, field: FacetField) -> list[str]:
    """The values an entry contributes to a facet; cast is multi-valued."""
    if field is FacetField.CAST:
        return [str(member) for member in entry.cast]
    return [str(getattr(entry, field.value) or "")]


def collation_key(value: str) -> tuple[str, str]:
    return (value.casefold(), value)


def _iter_values(entries: Iterable[Entry], field: FacetField) -> Iterator[str]:
    for entry in entries:
        for value in facet_raw_values(entry, field):
            value = value.strip()
            if value:
                yield value


def facet_values(field: str | FacetField, to_watch: Iterable[Entry]) -> list[str]:
    """Distinct non-blank values of `field`, deduplicated case-insensitively.

    The first spelling seen wins for display. Re-derived on every call.
    """
    facet = parse_facet_field(field)
    seen: dict[str, str] = {}
    for value in _iter_values(to_watch, facet):
        seen.setdefault(value.casefold(), value)
    return sorted(seen.values(), key=collation_key)


__all__ = [
    "FacetField",
    "collation_key",
    "facet_raw_values",
    "facet_values",
    "parse_facet_field",
]
