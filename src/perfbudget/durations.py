"""
Duration parsing and formatting for performance budgets.

Budgets and measurements carry durations as integer nanoseconds so that
sub-microsecond budgets (``registry_get`` is 100ns) compare exactly.
``datetime.timedelta`` only resolves microseconds, so it is accepted as
input but never used for storage.

Usage::

    from perfbudget.durations import parse_duration, format_duration

    parse_duration("100ms")      # 100_000_000
    parse_duration("1.5s")       # 1_500_000_000
    format_duration(500)         # "500ns"
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Union

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(ns|us|µs|ms|s|m|h)$")

DurationLike = Union[int, str, timedelta]


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string like "200ms", "10us" or "1.5s" into nanoseconds.

    A bare integer string is read as nanoseconds.

    Raises:
        ValueError: If the duration format is invalid.
    """
    if not duration_str or not duration_str.strip():
        raise ValueError("Duration string cannot be empty")

    text = duration_str.strip()
    if text.isdigit():
        return int(text)

    match = _DURATION_RE.match(text)
    if not match:
        raise ValueError(
            f"Invalid duration format: {duration_str!r}. "
            "Expected a number followed by ns, us, ms, s, m or h"
        )

    value, unit = match.groups()
    if "." in value:
        return round(float(value) * _UNITS[unit])
    return int(value) * _UNITS[unit]


def to_nanoseconds(value: DurationLike) -> int:
    """Coerce an int (nanoseconds), timedelta or duration string to nanoseconds."""
    if isinstance(value, bool):
        raise TypeError("Duration cannot be a bool")
    if isinstance(value, int):
        return value
    if isinstance(value, timedelta):
        # timedelta stores days/seconds/microseconds exactly; avoid float math
        return (
            (value.days * 86_400 + value.seconds) * SECOND
            + value.microseconds * MICROSECOND
        )
    if isinstance(value, str):
        return parse_duration(value)
    raise TypeError(f"Unsupported duration type: {type(value).__name__}")


def format_duration(nanoseconds: int) -> str:
    """Render nanoseconds with the largest unit that divides it evenly."""
    if nanoseconds == 0:
        return "0s"
    for unit, size in (("h", HOUR), ("m", MINUTE), ("s", SECOND), ("ms", MILLISECOND), ("us", MICROSECOND)):
        if nanoseconds % size == 0:
            return f"{nanoseconds // size}{unit}"
    return f"{nanoseconds}ns"
