from __future__ import annotations

from collections.abc import Mapping
import math
from typing import Any


def to_float(value: object, default: float = 0.0) -> float:
    """Lenient float read for NSE fields; handles ``"18,000.50"`` and junk."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed


def to_optional_float(value: object) -> float | None:
    if value is None or value == "" or value == "-":
        return None
    parsed = to_float(value, default=math.nan)
    return None if math.isnan(parsed) else parsed


def extract_str(raw: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""
