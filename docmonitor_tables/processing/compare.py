"""Value extraction and type-aware comparison of cell values.

These helpers have no UI dependency and never raise: values that cannot be
resolved or compared are treated as nullish or compared as strings.
"""

import datetime
import decimal
import json
import locale
import math
import numbers
import unicodedata
from collections.abc import Mapping, Sequence
from typing import Any


def is_nullish(value: Any) -> bool:
    """Return True for None and NaN."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def get_nested_value(row: Any, path: str) -> Any:
    """
    Resolve a dotted key against a row.

    Each segment is looked up as a mapping key, a sequence index (numeric
    segments only) or an attribute, in that order of preference.

    Args:
        row: Row object (dict, dataclass, or any object)
        path: Dotted key, e.g. ``"document_request_status.ref_data_value"``

    Returns:
        The resolved value, or None if any segment is absent
    """
    current = row
    for segment in str(path).split("."):
        if current is None or isinstance(current, (str, bytes, numbers.Number)):
            return None
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, Sequence):
            if not segment.isdigit() or int(segment) >= len(current):
                return None
            current = current[int(segment)]
        else:
            try:
                current = getattr(current, segment)
            except Exception:
                return None
            if callable(current):
                return None
    return current


def format_value(value: Any, fallback: str = "") -> str:
    """
    Stringify a cell value for display, filtering and fallback comparison.

    Containers are rendered as JSON, booleans as ``true``/``false``, and
    integral floats without the trailing ``.0``.

    Args:
        value: The cell value
        fallback: Returned for nullish values

    Returns:
        String representation
    """
    if is_nullish(value):
        return fallback
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, default=str, separators=(",", ":"))
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def collation_key(value: str) -> str:
    """
    Build a case- and accent-insensitive sort key for a string.

    The key is passed through ``locale.strxfrm`` so the active LC_COLLATE
    locale decides the final ordering.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(stripped.casefold())


def _sign(value: Any) -> int:
    return (value > 0) - (value < 0)


def compare_strings(a: str, b: str) -> int:
    """Locale-aware comparison ignoring case and accents."""
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, decimal.Decimal)) and not isinstance(
        value, bool
    )


def _is_date(value: Any) -> bool:
    return isinstance(value, (datetime.date, datetime.time))


def compare_values(a: Any, b: Any) -> int:
    """
    Compare two extracted cell values.

    Rules, in order:
    1. Both nullish -> 0
    2. Exactly one nullish -> the nullish value is greater (sorts last)
    3. str vs str -> locale-aware, case-insensitive comparison
    4. number vs number -> sign of the difference
    5. date vs date -> instant comparison
    6. Anything else -> compare string forms using rule 3

    Args:
        a: First value
        b: Second value

    Returns:
        -1, 0 or 1
    """
    a_null, b_null = is_nullish(a), is_nullish(b)
    if a_null and b_null:
        return 0
    if a_null:
        return 1
    if b_null:
        return -1

    if isinstance(a, str) and isinstance(b, str):
        return compare_strings(a, b)

    if _is_number(a) and _is_number(b):
        try:
            return _sign(a - b)
        except (TypeError, ValueError, ArithmeticError):
            pass

    if _is_date(a) and _is_date(b):
        try:
            return (a > b) - (a < b)
        except TypeError:
            # naive vs aware datetimes, date vs time
            pass

    return compare_strings(format_value(a), format_value(b))


def compare_with_direction(a: Any, b: Any, direction: str) -> int:
    """
    Compare for a sort direction while keeping nullish values last.

    Only comparisons between two non-null values are negated for 'desc'.
    """
    result = compare_values(a, b)
    if direction == "desc" and not (is_nullish(a) or is_nullish(b)):
        return -result
    return result
