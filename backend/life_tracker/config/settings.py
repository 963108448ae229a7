from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

# ===== 持久化（默认值，运行时由基础设施层注入） =====

# Single key under which the whole dataset blob is stored.
STORAGE_KEY = "lifeTrackerData_v1"

# Current blob layout. v1 only had movies/exercises/recipes.
SCHEMA_VERSION = 2

# ===== 导入 / 导出 =====

EXPORT_FILENAME = "life-tracker-export.json"
EXPORT_INDENT = 2

# Narrow `{movies: [...]}` file used by the folder save/load feature.
FOLDER_FILENAME = "movie-tracker.json"

# ===== 首次安装的默认数据 =====

SEED_SAMPLE_MOVIES = True
DEFAULT_DATASET_PATH = Path(__file__).resolve().parent / "default_dataset.yaml"

# ===== 展示 =====

DATE_FORMAT = "%b %d, %Y"
EMPTY_PLACEHOLDER = "—"
UNTITLED_PLACEHOLDER = "Untitled"

_DEFAULT_KEYS = [
    "STORAGE_KEY",
    "SCHEMA_VERSION",
    "EXPORT_FILENAME",
    "EXPORT_INDENT",
    "FOLDER_FILENAME",
    "SEED_SAMPLE_MOVIES",
    "DEFAULT_DATASET_PATH",
    "DATE_FORMAT",
    "EMPTY_PLACEHOLDER",
    "UNTITLED_PLACEHOLDER",
]

_DEFAULT_SETTINGS = {key: globals()[key] for key in _DEFAULT_KEYS}


def get_default_settings() -> dict[str, Any]:
    return {key: value for key, value in _DEFAULT_SETTINGS.items()}


def apply_runtime_overrides(overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        if key in _DEFAULT_SETTINGS:
            globals()[key] = value


def reset_runtime_overrides() -> None:
    apply_runtime_overrides(_DEFAULT_SETTINGS)
