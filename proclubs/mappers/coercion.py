from __future__ import annotations

from typing import Any


def as_int(value: Any, default: int = 0) -> int:
    # The vendor sends most counters as strings; some are floats ("3.0") or empty.
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return default


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def as_flag(value: Any) -> bool:
    return as_int(value) > 0


def as_dict(value: Any, *, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Expected object for {what}, got {type(value).__name__}")
    return value


def as_records(value: Any, *, what: str) -> list[dict[str, Any]]:
    """Accept the list, keyed-object and null shapes the vendor uses for collections."""
    if value is None:
        return []
    if isinstance(value, dict):
        rows = list(value.values())
    elif isinstance(value, list):
        rows = value
    else:
        raise ValueError(f"Expected list for {what}, got {type(value).__name__}")
    for row in rows:
        if not isinstance(row, dict):
            raise ValueError(f"Expected object rows for {what}, got {type(row).__name__}")
    return rows
