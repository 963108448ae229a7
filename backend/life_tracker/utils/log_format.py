from __future__ import annotations

import json
from enum import Enum
from typing import Any


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple, dict, str)):
        # Quote strings so titles with spaces stay unambiguous.
        return json.dumps(value, ensure_ascii=False)
    return json.dumps(str(value), ensure_ascii=False)


def format_kv(**fields: Any) -> str:
    """
    Render a compact single-line key=value log string.

    Example:
      event="Watch" entry_id="..." name="Dune" movies_count=0
    """
    return " ".join(f"{key}={_format_value(value)}" for key, value in fields.items() if value is not None)
