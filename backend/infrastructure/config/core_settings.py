from __future__ import annotations

from typing import Any

from infrastructure.config import settings as infra_settings
from life_tracker.config import settings as core_settings

_APPLIED = False
_LAST_OVERRIDES: dict[str, Any] | None = None


def build_core_overrides() -> dict[str, Any]:
    """Translate infrastructure env settings into `life_tracker.config.settings` keys."""
    defaults = core_settings.get_default_settings()
    overrides: dict[str, Any] = {
        "SEED_SAMPLE_MOVIES": infra_settings.TRACKER_SEED_SAMPLES,
    }
    if infra_settings.TRACKER_STORAGE_KEY:
        overrides["STORAGE_KEY"] = infra_settings.TRACKER_STORAGE_KEY
    if infra_settings.TRACKER_DEFAULT_DATASET_PATH is not None:
        overrides["DEFAULT_DATASET_PATH"] = infra_settings.TRACKER_DEFAULT_DATASET_PATH
    indent = infra_settings.TRACKER_EXPORT_INDENT
    overrides["EXPORT_INDENT"] = indent if indent is not None and indent >= 0 else defaults["EXPORT_INDENT"]
    return overrides


def apply_core_settings_overrides() -> dict[str, Any]:
    global _APPLIED, _LAST_OVERRIDES
    if _APPLIED and _LAST_OVERRIDES is not None:
        return _LAST_OVERRIDES

    overrides = build_core_overrides()
    core_settings.apply_runtime_overrides(overrides)
    _APPLIED = True
    _LAST_OVERRIDES = overrides
    return overrides
