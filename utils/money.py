# utils/money.py
from __future__ import annotations
import math
import re
from typing import Any, Optional

_NON_PRICE_CHARS = re.compile(r"[^0-9.]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_price(value: Any) -> Optional[float]:
    """
    Turn a SerpApi price (number, "$1,234", "1 234 USD", None) into a float.
    Returns None when nothing usable is left. Never raises.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        cleaned = _NON_PRICE_CHARS.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            # e.g. "1.2.3" left over from "v1.2.3"
            return None
        return number if math.isfinite(number) else None

    return None


def coerce_minutes(value: Any) -> Optional[int]:
    """
    Durations arrive as ints, floats or strings like "135" / "135 min".
    Falsy values (None, 0, "") are treated as absent.
    """
    if not value or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None

    return None
