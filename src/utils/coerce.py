"""
Numeric coercion helpers for untyped configuration and request values.

Configuration arrives from YAML and query strings, so numbers may be ints,
floats, numeric strings, booleans or garbage. Everything funnels through
to_number() so NaN, infinities and booleans are treated as "not a number".
"""

import math
from typing import Any, Optional


def to_number(raw: Any) -> Optional[float]:
    """Return raw as a finite float, or None when it is not a usable number"""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_unit(raw: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce into [0, 1]; non-numeric input yields default"""
    value = to_number(raw)
    if value is None:
        return default
    return clamp(value, 0.0, 1.0)


def positive_int(raw: Any, default: int) -> int:
    """Coerce into a positive integer (milliseconds, counts); anything else yields default"""
    value = to_number(raw)
    if value is None or value < 1:
        return default
    return int(round(value))


def to_bool(raw: Any, default: bool = False) -> bool:
    """Only real booleans count; "true" strings from YAML typos fall back to default"""
    if isinstance(raw, bool):
        return raw
    return default
