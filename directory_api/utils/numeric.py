"""
Parse-or-default helpers for numeric fields that may be stored as NULL, strings or Decimals.
"""
import math
from typing import Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """Coerce a value to float, returning default for None, garbage, NaN and infinities"""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def safe_int(value: Any, default: int = 0) -> int:
    """Coerce a value to int, truncating floats and numeric strings"""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    result = safe_float(value, default=None)
    if result is None:
        return default
    return int(result)
