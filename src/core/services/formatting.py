"""Display formatting for catalog values.

The catalog stores every measurement as a string, often "unknown" or
"n/a". Anything that does not parse renders as "Unknown".
"""

from __future__ import annotations

import re
from datetime import datetime

_UNKNOWN = "Unknown"
_LEADING_NUMBER = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)")
_LEADING_INTEGER = re.compile(r"^\s*[-+]?\d+")


def _parse_float(value: str) -> float | None:
    # Mirrors parseFloat: reads the leading number and ignores the rest ("1,358" -> 1).
    match = _LEADING_NUMBER.match(value or "")
    if not match:
        return None
    return float(match.group(0))


def format_date(iso_string: str) -> str:
    """ISO timestamp -> dd-MM-yyyy."""

    try:
        return datetime.fromisoformat(iso_string.replace("Z", "+00:00")).strftime("%d-%m-%Y")
    except (AttributeError, ValueError):
        return _UNKNOWN


def format_height(height: str) -> str:
    """Centimetres -> metres with two decimals."""

    value = _parse_float(height)
    if value is None:
        return _UNKNOWN
    return f"{value / 100:.2f} m"


def _plain_number(value: float) -> str:
    # Whole numbers print without a fraction or exponent ("1000000", not "1e+06").
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def format_mass(mass: str) -> str:
    value = _parse_float(mass)
    if value is None:
        return _UNKNOWN
    return f"{_plain_number(value)} kg"


def format_population(population: str) -> str:
    """Leading integer with thousands separators ("1,000" reads as 1)."""

    if population == "unknown":
        return _UNKNOWN
    match = _LEADING_INTEGER.match(population or "")
    if not match:
        return _UNKNOWN
    return f"{int(match.group(0)):,}"


def format_diameter(diameter: str) -> str:
    return f"{diameter} km"


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]
