"""Default-resolution helpers for loosely-typed aggregator fields.

Aggregator payloads differ in which field names they fill in and in how
strictly they type their values. These helpers are the single place where
a missing or malformed value is turned into a documented default.
"""
import math
import re
import sys
from typing import Any, Mapping, Optional

TRUTHY_STRINGS = frozenset({"true", "1", "yes", "y", "on"})
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def first_of(source: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key that is present and not None."""
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return default


def coerce_number(value: Any, default: float) -> float:
    """
    Coerce a value to a finite number.

    Integers and floats pass through unchanged (including negative and
    fractional values). Strings must be plain ASCII decimal literals and are
    parsed as int, then float. Anything else (None, booleans, empty or
    non-numeric strings, NaN, infinity, integers beyond float range)
    resolves to ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        text = value.strip()
        try:
            if INTEGER_PATTERN.fullmatch(text):
                value = int(text)
            elif DECIMAL_PATTERN.fullmatch(text):
                value = float(text)
            else:
                return default
        except ValueError:
            # int() refuses digit strings past the interpreter's conversion limit
            return default
    if isinstance(value, int):
        return value if abs(value) <= sys.float_info.max else default
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    return default


def coerce_bool(value: Any, default: bool = False) -> bool:
    """Coerce a value to a boolean; strings use an explicit truthy set."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def coerce_str(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Stringify a value, or return ``default`` when it is None."""
    if value is None:
        return default
    return str(value)


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return the value if it is a mapping, otherwise an empty dict."""
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> list:
    """Return the value as a list if it is a list or tuple, otherwise []."""
    return list(value) if isinstance(value, (list, tuple)) else []
