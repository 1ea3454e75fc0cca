"""Clock-value parsing for SMIL attributes and computed CSS animation styles."""

from __future__ import annotations

import math
import re

# Leading numeric prefix, the same subset a browser's parseFloat() accepts.
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(value: str | None) -> float | None:
    """Return the leading number in *value*, or ``None`` if there is none.

    ``"400px"`` -> 400.0, ``" 2.5e1 "`` -> 25.0, ``"auto"`` -> None.
    """
    if value is None:
        return None
    match = _NUMBER_PREFIX.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if not math.isfinite(number):
        return None
    return number


def parse_time_ms(value: str | None) -> float | None:
    """Parse a time value into milliseconds.

    ``"250ms"`` -> 250.0, ``"2s"`` -> 2000.0. Any other suffix (or none) is
    taken as a raw millisecond count with no unit coercion, so ``"3"`` and
    ``"3min"`` both give 3.0. Returns ``None`` when *value* is absent or has
    no numeric prefix (``"indefinite"``, ``"click"``, ``""``).
    """
    if value is None:
        return None
    text = value.strip()
    number = parse_number(text)
    if number is None:
        return None
    if text.endswith("ms"):
        return number
    if text.endswith("s"):
        return number * 1000.0
    return number


def parse_repeat_count(value: str | None) -> float | None:
    """Return a numeric ``repeatCount`` or ``None`` for absent/non-numeric values."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        count = float(text)
    except ValueError:
        return None
    if not math.isfinite(count) or count < 0:
        return None
    return count


def split_css_list(value: str | None) -> list[str]:
    """Split a computed-style list (``"1s, 2s"``) into trimmed items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",")]
