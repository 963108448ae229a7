import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# 统一加载环境变量，确保配置来源一致。
# 注意：本项目以项目根目录的 .env 为主要开发配置来源，优先级应高于外部 shell 环境变量。
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要整数值，但当前为 {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _get_env_choice(key: str, choices: set[str], default: str) -> str:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value not in choices:
        raise ValueError(
            f"环境变量 {key} 必须为 {', '.join(sorted(choices))} 之一，但当前为 {raw}"
        )
    return value


def _optional_path(key: str) -> Optional[Path]:
    raw = (os.getenv(key) or "").strip()
    return Path(raw).expanduser() if raw else None


# ===== 基础路径设置 =====
#
# NOTE:
# - In monorepo layout, all backend code lives under `<repo>/backend/`.
# - Runtime artifacts (the stored dataset) live under `<repo>/files/`, NOT
#   under `<repo>/backend/`.

INFRASTRUCTURE_DIR = Path(__file__).resolve().parent.parent  # backend/infrastructure/
_BACKEND_DIR = INFRASTRUCTURE_DIR.parent  # backend/

if _BACKEND_DIR.name == "backend":
    PROJECT_ROOT = _BACKEND_DIR.parent
else:
    PROJECT_ROOT = Path.cwd()

RUNTIME_ROOT = Path(os.getenv("RUNTIME_ROOT", PROJECT_ROOT / "files")).expanduser()

# ===== 存储配置 =====

# file: one JSON file per storage key under TRACKER_DATA_DIR; memory: process-local.
TRACKER_STORAGE_BACKEND = _get_env_choice("TRACKER_STORAGE_BACKEND", {"file", "memory"}, "file")
TRACKER_DATA_DIR = Path(os.getenv("TRACKER_DATA_DIR", RUNTIME_ROOT / "tracker")).expanduser()

# Optional user folder for the movie-tracker.json save/load feature.
TRACKER_FOLDER_DIR = _optional_path("TRACKER_FOLDER_DIR")

# ===== Core overrides =====

TRACKER_STORAGE_KEY = (os.getenv("TRACKER_STORAGE_KEY") or "").strip() or None
TRACKER_SEED_SAMPLES = _get_env_bool("TRACKER_SEED_SAMPLES", True)
TRACKER_DEFAULT_DATASET_PATH = _optional_path("TRACKER_DEFAULT_DATASET_PATH")
TRACKER_EXPORT_INDENT = _get_env_int("TRACKER_EXPORT_INDENT", None)
