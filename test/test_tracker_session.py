import json
import sys
import tempfile
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.persistence.local import InMemoryKeyValueStore, LocalFolderStore
from life_tracker.config import settings as core_settings
from life_tracker.movies.entities import LogType, MovieDraft
from life_tracker.movies.errors import FolderStoreError, ImportFormatError, ValidationError
from life_tracker.movies.session import TrackerSession

KEY = "lifeTrackerData_v1"


class _FailingStore(InMemoryKeyValueStore):
    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.fail = False

    def set(self, key: str, value: str) -> None:
        if self.fail:
            raise OSError("quota exceeded")
        super().set(key, value)


class TestTrackerSessionLoad(unittest.TestCase):
    def tearDown(self) -> None:
        core_settings.reset_runtime_overrides()

    def test_fresh_install_seeds_and_persists_default(self) -> None:
        store = InMemoryKeyValueStore()
        session = TrackerSession(store, clock=lambda: 10_000_000_000)
        self.assertEqual([e.name for e in session.dataset.to_watch], ["Inception", "3 Idiots"])
        stored = json.loads(store.get(KEY))
        self.assertEqual([m["name"] for m in stored["movies"]], ["Inception", "3 Idiots"])
        self.assertEqual(stored["watchedMovies"], [])
        self.assertEqual(stored["movieLogs"], [])

    def test_corrupt_blob_is_replaced_by_default(self) -> None:
        core_settings.apply_runtime_overrides({"SEED_SAMPLE_MOVIES": False})
        store = InMemoryKeyValueStore({KEY: "{not json"})
        session = TrackerSession(store)
        self.assertEqual(session.dataset.to_watch, [])
        self.assertEqual(json.loads(store.get(KEY))["movies"], [])

    def test_v1_blob_is_upgraded_in_memory(self) -> None:
        blob = {"movies": [{"id": "m1", "name": "Dune", "createdAt": 5}], "exercises": [], "recipes": []}
        store = InMemoryKeyValueStore({KEY: json.dumps(blob)})
        session = TrackerSession(store)
        self.assertEqual([e.id for e in session.dataset.to_watch], ["m1"])
        self.assertEqual(session.dataset.watched, [])
        # Loading alone does not rewrite a readable blob.
        self.assertEqual(json.loads(store.get(KEY)), blob)

    def test_non_finite_timestamps_do_not_break_boot(self) -> None:
        raw = '{"movies": [{"id": "a", "name": "X", "createdAt": 1e400}], "watchedMovies": [], "movieLogs": []}'
        store = InMemoryKeyValueStore({KEY: raw})
        session = TrackerSession(store)
        self.assertEqual([e.id for e in session.dataset.to_watch], ["a"])
        self.assertIsNone(session.dataset.to_watch[0].created_at)
        self.assertEqual([e.id for e in session.search("x")], ["a"])

    def test_custom_storage_key(self) -> None:
        store = InMemoryKeyValueStore()
        TrackerSession(store, storage_key="other")
        self.assertIsNone(store.get(KEY))
        self.assertIsNotNone(store.get("other"))


class TestTrackerSessionOperations(unittest.TestCase):
    def setUp(self) -> None:
        core_settings.apply_runtime_overrides({"SEED_SAMPLE_MOVIES": False})
        self.store = _FailingStore()
        self.session = TrackerSession(self.store)

    def tearDown(self) -> None:
        core_settings.reset_runtime_overrides()

    def _stored(self) -> dict:
        return json.loads(self.store.get(KEY))

    def test_every_mutation_is_persisted(self) -> None:
        entry = self.session.add_movie(MovieDraft(name="Dune", platform="Max"))
        self.assertEqual(self._stored()["movies"][0]["id"], entry.id)
        self.session.mark_watched(entry.id)
        stored = self._stored()
        self.assertEqual(stored["movies"], [])
        self.assertEqual(stored["watchedMovies"][0]["id"], entry.id)
        self.assertEqual([ev["logType"] for ev in stored["movieLogs"]], ["Watch", "Add"])
        self.assertIn("watchedAt", stored["watchedMovies"][0])

    def test_unknown_ids_are_ignored(self) -> None:
        self.assertIsNone(self.session.mark_watched("nope"))
        self.assertIsNone(self.session.mark_unwatched("nope"))
        self.assertIsNone(self.session.delete_watched("nope"))
        self.assertIsNone(self.session.delete_movie("nope"))
        self.assertIsNone(self.session.edit_movie("nope", MovieDraft(name="x")))
        self.assertEqual(self.session.logs(), [])

    def test_validation_error_propagates(self) -> None:
        with self.assertRaises(ValidationError):
            self.session.add_movie(MovieDraft(name=" "))

    def test_storage_failure_leaves_state_unchanged(self) -> None:
        entry = self.session.add_movie(MovieDraft(name="Dune"))
        self.store.fail = True
        with self.assertRaises(OSError):
            self.session.mark_watched(entry.id)
        self.assertEqual([e.id for e in self.session.dataset.to_watch], [entry.id])
        self.assertEqual(len(self.session.logs()), 1)

    def test_search_and_facets(self) -> None:
        self.session.add_movie(MovieDraft(name="Big", cast=("Tom Hanks",), platform="Netflix"))
        self.session.add_movie(MovieDraft(name="Top Gun", cast=("Tom Cruise",), platform="Prime Video"))
        self.assertEqual([e.name for e in self.session.search("", "cast", "tom hanks")], ["Big"])
        self.assertEqual(self.session.facets("platform"), ["Netflix", "Prime Video"])

    def test_watched_is_most_recent_first(self) -> None:
        clock = iter(range(1_000, 100_000, 1_000))
        session = TrackerSession(InMemoryKeyValueStore(), clock=lambda: next(clock))
        a = session.add_movie(MovieDraft(name="A"))
        b = session.add_movie(MovieDraft(name="B"))
        session.mark_watched(a.id)
        session.mark_watched(b.id)
        self.assertEqual([e.name for e in session.watched()], ["B", "A"])
        self.assertEqual(len(session.logs_by_day()), 1)

    def test_export_then_import_replaces_dataset(self) -> None:
        entry = self.session.add_movie(MovieDraft(name="Dune"))
        self.session.mark_watched(entry.id)
        exported = self.session.export_json()
        self.assertIn('\n  "watchedMovies"', exported)

        other = TrackerSession(InMemoryKeyValueStore())
        other.add_movie(MovieDraft(name="Will be replaced"))
        other.import_json(exported)
        self.assertEqual(other.dataset.to_watch, [])
        self.assertEqual([e.id for e in other.dataset.watched], [entry.id])
        self.assertEqual([ev.log_type for ev in other.logs()], [LogType.WATCH, LogType.ADD])

    def test_import_failure_keeps_dataset(self) -> None:
        self.session.add_movie(MovieDraft(name="Dune"))
        before = self.store.get(KEY)
        for bad in ("[]", "garbage", '{"movies": [1]}'):
            with self.subTest(bad=bad):
                with self.assertRaises(ImportFormatError):
                    self.session.import_json(bad)
        self.assertEqual([e.name for e in self.session.dataset.to_watch], ["Dune"])
        self.assertEqual(self.store.get(KEY), before)

    def test_import_with_non_finite_timestamp_is_accepted(self) -> None:
        self.session.import_json('{"movies": [{"id": "m1", "name": "Heat", "createdAt": Infinity}]}')
        self.assertEqual([e.name for e in self.session.dataset.to_watch], ["Heat"])
        self.assertIn('"createdAt": Infinity', self.session.export_json())

    def test_import_then_mutate_uses_new_dataset(self) -> None:
        self.session.import_json({"movies": [{"id": "m1", "name": "Heat", "createdAt": 1}]})
        self.assertIsNotNone(self.session.mark_watched("m1"))
        self.assertEqual(self._stored()["watchedMovies"][0]["id"], "m1")


class TestTrackerSessionFolder(unittest.TestCase):
    def setUp(self) -> None:
        core_settings.apply_runtime_overrides({"SEED_SAMPLE_MOVIES": False})
        self._tmp = tempfile.TemporaryDirectory()
        self.folder_dir = Path(self._tmp.name)
        self.store = InMemoryKeyValueStore()
        self.session = TrackerSession(self.store, folder=LocalFolderStore(self.folder_dir))

    def tearDown(self) -> None:
        self._tmp.cleanup()
        core_settings.reset_runtime_overrides()

    def test_requires_a_selected_folder(self) -> None:
        session = TrackerSession(InMemoryKeyValueStore(), folder=LocalFolderStore(None))
        self.assertFalse(session.folder_available)
        with self.assertRaises(FolderStoreError):
            session.save_to_folder()
        with self.assertRaises(FolderStoreError):
            TrackerSession(InMemoryKeyValueStore()).load_from_folder()

    def test_save_writes_only_movies(self) -> None:
        self.session.add_movie(MovieDraft(name="Dune"))
        filename = self.session.save_to_folder()
        data = json.loads((self.folder_dir / filename).read_text(encoding="utf-8"))
        self.assertEqual(list(data), ["movies"])
        self.assertEqual(data["movies"][0]["name"], "Dune")

    def test_load_replaces_to_watch_and_skips_watched_ids(self) -> None:
        watched = self.session.add_movie(MovieDraft(name="Seen"))
        self.session.mark_watched(watched.id)
        self.session.add_movie(MovieDraft(name="Old"))
        payload = {"movies": [{"id": watched.id, "name": "Seen"}, {"id": "n1", "name": "New"}]}
        (self.folder_dir / "movie-tracker.json").write_text(json.dumps(payload), encoding="utf-8")

        loaded = self.session.load_from_folder()
        self.assertEqual([e.id for e in loaded], ["n1"])
        self.assertEqual([e.name for e in self.session.dataset.to_watch], ["New"])
        self.assertEqual([e.id for e in self.session.dataset.watched], [watched.id])
        self.assertEqual(json.loads(self.store.get(KEY))["movies"][0]["id"], "n1")

    def test_load_failures_leave_state_untouched(self) -> None:
        self.session.add_movie(MovieDraft(name="Dune"))
        with self.assertRaises(FolderStoreError):
            self.session.load_from_folder()
        (self.folder_dir / "movie-tracker.json").write_text('{"nope": 1}', encoding="utf-8")
        with self.assertRaises(FolderStoreError):
            self.session.load_from_folder()
        self.assertEqual([e.name for e in self.session.dataset.to_watch], ["Dune"])


if __name__ == "__main__":
    unittest.main()
