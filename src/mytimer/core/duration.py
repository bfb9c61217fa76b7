"""Duration conversion -- turns ``(value, unit)`` pairs into milliseconds.

Also provides the breakdown of a millisecond count into calendar-like units
used by the timer's display accessors.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from numbers import Real

from mytimer.core.errors import InvalidUnit, InvalidValue

UNIT_MS: dict[str, int] = {
    "days": 24 * 60 * 60 * 1000,
    "hours": 60 * 60 * 1000,
    "minutes": 60 * 1000,
    "seconds": 1000,
    "milliseconds": 1,
}

_ALIASES: dict[str, str] = {
    "d": "days",
    "day": "days",
    "h": "hours",
    "hr": "hours",
    "hour": "hours",
    "m": "minutes",
    "min": "minutes",
    "minute": "minutes",
    "s": "seconds",
    "sec": "seconds",
    "second": "seconds",
    "ms": "milliseconds",
    "millisecond": "milliseconds",
}


def normalize_unit(unit: str | None) -> str:
    """Return the canonical unit name for *unit*.

    ``None`` means milliseconds.  Raises :class:`InvalidUnit` otherwise.
    """
    if unit is None:
        return "milliseconds"
    if not isinstance(unit, str):
        raise InvalidUnit(f"unit must be a string, got {type(unit).__name__}")
    key = unit.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in UNIT_MS:
        raise InvalidUnit(f"unknown time unit: {unit!r}")
    return key


def convert(value: object, unit: str | None = None) -> int:
    """Convert *value* expressed in *unit* to whole milliseconds.

    Raises :class:`InvalidValue` for anything that is not a finite real
    number (booleans included) and :class:`InvalidUnit` for unknown units.
    Negative values are converted as-is; range checks belong to the caller.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidValue(f"duration value must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidValue(f"duration value must be finite, got {value!r}")
    return round(value * UNIT_MS[normalize_unit(unit)])


def split(ms: int, units: Iterable[str]) -> dict[str, int]:
    """Break *ms* into *units*, largest unit first.

    Each unit takes as many whole multiples as fit; whatever is left below
    the smallest requested unit is dropped.  Keys keep the canonical names
    in the order they were requested.
    """
    canonical = [normalize_unit(u) for u in units]
    remainder = max(int(ms), 0)
    parts = {}
    for unit in sorted(set(canonical), key=UNIT_MS.__getitem__, reverse=True):
        parts[unit], remainder = divmod(remainder, UNIT_MS[unit])
    return {unit: parts[unit] for unit in canonical}


def format_clock(ms: int) -> str:
    """Format *ms* as ``H:MM:SS``, or ``M:SS`` below one hour."""
    parts = split(ms, ("hours", "minutes", "seconds"))
    if parts["hours"]:
        return f"{parts['hours']}:{parts['minutes']:02d}:{parts['seconds']:02d}"
    return f"{parts['minutes']}:{parts['seconds']:02d}"
