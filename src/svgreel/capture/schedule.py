"""Closed-form frame scheduling.

Frame count and spacing depend only on the inferred duration and the target
rate, never on how long capture takes.
"""

from __future__ import annotations

import math

from svgreel.models import FrameSchedule

# Absorbs float noise in duration / 1000 * fps before taking the ceiling.
_CEIL_PRECISION = 9


def frame_count(duration_ms: float, fps: float) -> int:
    """``ceil(duration_ms / 1000 * fps)``, at least 1."""
    exact = round(duration_ms / 1000.0 * fps, _CEIL_PRECISION)
    return max(1, math.ceil(exact))


def build_schedule(duration_ms: float, fps: float) -> FrameSchedule:
    """Return evenly spaced offsets ``i * duration_ms / n`` for ``i`` in ``[0, n)``.

    Raises:
        ValueError: If *fps* is not positive or *duration_ms* is negative or
            not finite.
    """
    if not math.isfinite(fps) or fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    if not math.isfinite(duration_ms) or duration_ms < 0:
        raise ValueError(f"duration_ms must be a non-negative number, got {duration_ms}")

    n = frame_count(duration_ms, fps)
    interval = duration_ms / n
    offsets = tuple(i * interval for i in range(n))
    return FrameSchedule(duration_ms=duration_ms, fps=fps, offsets=offsets)
