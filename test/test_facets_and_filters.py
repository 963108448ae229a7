import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from life_tracker.movies.entities import Entry
from life_tracker.movies.facets import FacetField, facet_values
from life_tracker.movies.filters import query


def _entries() -> list[Entry]:
    return [
        Entry(id="1", name="Inception", language="English", platform="Netflix",
              cast=["Leonardo DiCaprio", "Elliot Page"], created_at=100),
        Entry(id="2", name="3 Idiots", language="Hindi", platform="Prime Video",
              cast=["Aamir Khan"], created_at=300),
        Entry(id="3", name="Dune", language="english", platform=" netflix ",
              cast=["Timothée Chalamet", "leonardo dicaprio"], created_at=200),
        Entry(id="4", name="Untimed", language="", platform="", cast=[]),
    ]


class TestFacetIndex(unittest.TestCase):
    def test_scalar_values_are_deduplicated_case_insensitively(self) -> None:
        self.assertEqual(facet_values("platform", _entries()), ["Netflix", "Prime Video"])
        self.assertEqual(facet_values(FacetField.LANGUAGE, _entries()), ["English", "Hindi"])

    def test_cast_is_flattened(self) -> None:
        self.assertEqual(
            facet_values("cast", _entries()),
            ["Aamir Khan", "Elliot Page", "Leonardo DiCaprio", "Timothée Chalamet"],
        )

    def test_sorting_ignores_case(self) -> None:
        entries = [Entry(id="a", name="x", platform="hulu"), Entry(id="b", name="y", platform="Apple TV")]
        self.assertEqual(facet_values("platform", entries), ["Apple TV", "hulu"])

    def test_empty_collection(self) -> None:
        self.assertEqual(facet_values("cast", []), [])

    def test_unknown_field_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            facet_values("director", _entries())


class TestFilterEngine(unittest.TestCase):
    def test_empty_query_returns_all_newest_first(self) -> None:
        result = query(_entries(), "", None, None)
        self.assertEqual([e.id for e in result], ["2", "3", "1", "4"])

    def test_ties_and_missing_timestamps_keep_input_order(self) -> None:
        entries = [
            Entry(id="a", name="a"),
            Entry(id="b", name="b", created_at=5),
            Entry(id="c", name="c"),
            Entry(id="d", name="d", created_at=5),
        ]
        self.assertEqual([e.id for e in query(entries)], ["b", "d", "a", "c"])

    def test_free_text_is_case_insensitive(self) -> None:
        self.assertEqual([e.id for e in query(_entries(), "INCEPTION")], ["1"])

    def test_free_text_searches_cast_language_and_platform(self) -> None:
        self.assertEqual([e.id for e in query(_entries(), "aamir")], ["2"])
        self.assertEqual([e.id for e in query(_entries(), "  prime vid ")], ["2"])
        self.assertEqual([e.id for e in query(_entries(), "dicaprio")], ["3", "1"])

    def test_cast_facet_requires_exact_member(self) -> None:
        entries = [Entry(id="1", name="A", cast=["Tom Hanks"]), Entry(id="2", name="B", cast=["Tom Cruise"])]
        self.assertEqual([e.id for e in query(entries, "", "cast", "Tom Hanks")], ["1"])
        self.assertEqual(query(entries, "", "cast", "Tom"), [])

    def test_scalar_facet_is_case_insensitive_equality(self) -> None:
        self.assertEqual([e.id for e in query(_entries(), "", "platform", "NETFLIX")], ["3", "1"])

    def test_blank_facet_parts_pass_everything(self) -> None:
        self.assertEqual(len(query(_entries(), "", "platform", "")), 4)
        self.assertEqual(len(query(_entries(), "", None, "Netflix")), 4)
        self.assertEqual(len(query(_entries(), "", "", "Netflix")), 4)

    def test_text_and_facet_are_anded(self) -> None:
        self.assertEqual([e.id for e in query(_entries(), "dune", "cast", "Leonardo DiCaprio")], ["3"])
        self.assertEqual(query(_entries(), "inception", "language", "Hindi"), [])

    def test_query_does_not_mutate_input(self) -> None:
        entries = _entries()
        before = [e.id for e in entries]
        query(entries, "", None, None)
        self.assertEqual([e.id for e in entries], before)


if __name__ == "__main__":
    unittest.main()
