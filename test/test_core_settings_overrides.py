import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.config import core_settings as infra_core
from infrastructure.config import settings as infra_settings
from life_tracker.config import settings as core_settings


class TestCoreSettingsOverrides(unittest.TestCase):
    def tearDown(self) -> None:
        core_settings.reset_runtime_overrides()

    def test_runtime_overrides_only_touch_known_keys(self) -> None:
        core_settings.apply_runtime_overrides({"STORAGE_KEY": "custom", "NOT_A_SETTING": 1})
        self.assertEqual(core_settings.STORAGE_KEY, "custom")
        self.assertFalse(hasattr(core_settings, "NOT_A_SETTING"))
        core_settings.reset_runtime_overrides()
        self.assertEqual(core_settings.STORAGE_KEY, "lifeTrackerData_v1")

    def test_default_settings_are_a_copy(self) -> None:
        defaults = core_settings.get_default_settings()
        defaults["EXPORT_INDENT"] = 8
        self.assertEqual(core_settings.get_default_settings()["EXPORT_INDENT"], 2)

    def test_build_core_overrides_from_env_settings(self) -> None:
        with mock.patch.multiple(
            infra_settings,
            TRACKER_SEED_SAMPLES=False,
            TRACKER_STORAGE_KEY="tracker_test",
            TRACKER_DEFAULT_DATASET_PATH=None,
            TRACKER_EXPORT_INDENT=-1,
        ):
            overrides = infra_core.build_core_overrides()
        self.assertEqual(
            overrides,
            {"SEED_SAMPLE_MOVIES": False, "STORAGE_KEY": "tracker_test", "EXPORT_INDENT": 2},
        )

    def test_build_tracker_session_uses_memory_backend_and_folder(self) -> None:
        from infrastructure.bootstrap import build_tracker_session

        with tempfile.TemporaryDirectory() as tmp:
            session = build_tracker_session(backend="memory", folder_dir=Path(tmp))
            self.assertTrue(session.folder_available)
            self.assertEqual(session.save_to_folder(), "movie-tracker.json")
            self.assertTrue((Path(tmp) / "movie-tracker.json").is_file())


if __name__ == "__main__":
    unittest.main()
