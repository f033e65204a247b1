from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_str(v) for v in value)
    return str(value)


def value_filter(value: Any) -> Any:
    """Coerce the literal strings "true", "false" and "null" to their typed values.

    Matching is case-insensitive; any other string is returned untouched.
    """
    if not isinstance(value, str):
        return value

    match value.lower():
        case "true":
            return True
        case "false":
            return False
        case "null":
            return None
        case _:
            return value


def deep_get(source: Any, path: str, default: Any = None) -> Any:
    current = source
    for segment in str(path or "").split("."):
        if not segment:
            continue
        if isinstance(current, Mapping):
            if segment not in current:
                return default
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return default
            current = current[index]
        else:
            return default
    return current


def split_comma_values(value: Any) -> list[str]:
    raw = to_str(value).strip()
    if not raw:
        return []
    parts = [p.strip() for p in raw.split(",")]
    return [p for p in parts if p]


def flatten_candidates(args: tuple[Any, ...]) -> list[str]:
    out: list[str] = []
    for arg in args:
        if arg is None:
            continue
        if isinstance(arg, (list, tuple)):
            out.extend(flatten_candidates(tuple(arg)))
            continue
        out.extend(split_comma_values(arg))
    return out
