"""Deterministic frame capture.

For each scheduled offset the driver seeks every animation on the page to
that absolute time, waits for the paint to settle, and writes one
transparent PNG. Rendering-engine errors are translated into
``CaptureError``; callers never see raw Playwright exceptions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from svgreel.config import FRAME_PREFIX, FRAME_SUFFIX, SETTLE_DELAY_MS, frame_filename
from svgreel.errors import CaptureError
from svgreel.models import FrameSchedule

logger = logging.getLogger(__name__)

# Web Animations (CSS animations/transitions, element.animate()) are paused and
# pinned to t; SMIL timelines are paused and pinned through each <svg> root.
SEEK_SCRIPT = """
(t) => {
  const seen = new Set(document.getAnimations ? document.getAnimations() : []);
  document.querySelectorAll('*').forEach((el) => {
    if (el.getAnimations) el.getAnimations().forEach((a) => seen.add(a));
  });
  seen.forEach((animation) => {
    animation.pause();
    animation.currentTime = t;
  });
  document.querySelectorAll('svg').forEach((svg) => {
    if (typeof svg.pauseAnimations === 'function') svg.pauseAnimations();
    if (typeof svg.setCurrentTime === 'function') svg.setCurrentTime(t / 1000);
  });
  return seen.size;
}
"""

# Resolves after two animation frames, i.e. once the seeked state has painted.
PAINT_SCRIPT = """
() => new Promise((resolve) => requestAnimationFrame(() => requestAnimationFrame(() => resolve(true))))
"""


def set_animation_time(page: Page, time_ms: float) -> int:
    """Force every animation on *page* to the absolute time *time_ms*.

    Idempotent: the result depends only on *time_ms*, not on earlier calls.
    Returns the number of Web Animations objects that were pinned.
    """
    return page.evaluate(SEEK_SCRIPT, time_ms)


def settle(page: Page, settle_ms: int = SETTLE_DELAY_MS) -> None:
    """Wait for the seeked state to paint, then a fixed *settle_ms*."""
    page.evaluate(PAINT_SCRIPT)
    if settle_ms > 0:
        page.wait_for_timeout(settle_ms)


def prepare_scratch_dir(scratch_dir: Path) -> None:
    """Create *scratch_dir* and drop frame files left by an earlier run.

    Stale frames past the new frame count would otherwise be read by the
    encoder's image pattern.
    """
    scratch_dir.mkdir(parents=True, exist_ok=True)
    for stale in scratch_dir.glob(f"{FRAME_PREFIX}*{FRAME_SUFFIX}"):
        stale.unlink(missing_ok=True)


def capture_frames(
    page: Page,
    schedule: FrameSchedule,
    scratch_dir: Path,
    settle_ms: int = SETTLE_DELAY_MS,
    progress_callback: Callable[[int, int], None] | None = None,
) -> list[Path]:
    """Capture one PNG per scheduled offset, strictly in schedule order.

    Parameters
    ----------
    page:
        Page already sized to the output dimensions.
    schedule:
        Offsets from :func:`svgreel.capture.schedule.build_schedule`.
    scratch_dir:
        Directory for the frame files. Created if absent.
    settle_ms:
        Fixed wait after each seek, on top of the paint signal.
    progress_callback:
        Optional callable invoked as ``(completed, total)`` after each frame.

    Returns
    -------
    list[Path]
        Frame paths in temporal order (``frame-000000.png`` ...).

    Raises
    ------
    CaptureError
        On the first frame that fails to seek, settle or save. No retry.
    """
    prepare_scratch_dir(scratch_dir)

    total = schedule.frame_count
    logger.info(
        "Capturing %d frames at %g FPS (interval %.3fms)", total, schedule.fps, schedule.interval_ms
    )

    frames: list[Path] = []
    last_percent = -1
    for index, offset_ms in enumerate(schedule.offsets):
        frame_path = scratch_dir / frame_filename(index)
        try:
            set_animation_time(page, offset_ms)
            settle(page, settle_ms)
            page.screenshot(path=str(frame_path), type="png", omit_background=True)
        except PlaywrightError as exc:
            raise CaptureError(index, offset_ms, str(exc)) from exc

        if not frame_path.exists():
            raise CaptureError(index, offset_ms, f"Screenshot reported success but {frame_path.name} is missing")

        frames.append(frame_path)
        completed = index + 1
        if progress_callback is not None:
            progress_callback(completed, total)

        percent = completed * 100 // total
        if percent != last_percent:
            logger.debug("Capture progress: %d%% (%d/%d)", percent, completed, total)
            last_percent = percent

    return frames
