"""
Life Tracker - personal movie tracker (Core)

- 稳定的 public import 路径为 `life_tracker.*`
- 本仓库约定：所有后端代码物理位置收敛到 `backend/` 下
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple

__version__ = "0.1.0"

_LAZY_IMPORTS: Dict[str, Tuple[str, str]] = {
    # ============ 1. 数据模型 ============
    "Dataset": ("life_tracker.movies.entities", "Dataset"),
    "Entry": ("life_tracker.movies.entities", "Entry"),
    "LogEvent": ("life_tracker.movies.entities", "LogEvent"),
    "MovieDraft": ("life_tracker.movies.entities", "MovieDraft"),
    # ============ 2. 引擎 ============
    "LifecycleEngine": ("life_tracker.movies.lifecycle", "LifecycleEngine"),
    "TrackerSession": ("life_tracker.movies.session", "TrackerSession"),
    "normalize": ("life_tracker.movies.schema", "normalize"),
    "query": ("life_tracker.movies.filters", "query"),
    "facet_values": ("life_tracker.movies.facets", "facet_values"),
    "group_by_day": ("life_tracker.movies.audit_log", "group_by_day"),
}


def __getattr__(name: str) -> Any:
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_path, attr_name = _LAZY_IMPORTS[name]
    module = import_module(module_path)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> Any:
    return sorted(set(list(globals().keys()) + list(_LAZY_IMPORTS.keys())))


__all__ = ["__version__", *_LAZY_IMPORTS.keys()]
