"""One end-to-end run: load, measure, schedule, capture, encode, clean up.

Stages, in dependency order:
  1. Load the source at the browser's default viewport and resolve dimensions
  2. Reload at the resolved size and device scale factor
  3. Infer the worst-case duration and build the frame schedule
  4. Capture one frame per offset into the scratch directory
  5. Encode GIF and MP4 concurrently
  6. Remove every frame and the scratch directory, whatever happened in 4-5
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from svgreel.capture.driver import capture_frames
from svgreel.capture.schedule import build_schedule
from svgreel.cleanup import cleanup_artifacts
from svgreel.config import CaptureSettings, get_scratch_dir
from svgreel.encode.coordinator import encode_outputs
from svgreel.models import RunResult
from svgreel.outputs import default_output_base, make_output_paths
from svgreel.probe.dimensions import resolve_dimensions
from svgreel.probe.duration import infer_duration_ms
from svgreel.render.session import RenderSession, resolve_source_url

logger = logging.getLogger(__name__)


def render_animation(
    source: str,
    output_base: Optional[Path] = None,
    settings: Optional[CaptureSettings] = None,
    scratch_dir: Optional[Path] = None,
    now: Optional[datetime] = None,
    frame_progress: Optional[Callable[[int, int], None]] = None,
    encode_progress: Optional[Callable[[str, float], None]] = None,
    on_schedule: Optional[Callable[[int], None]] = None,
) -> RunResult:
    """Capture *source* and write a looping GIF and an MP4 beside *output_base*.

    Args:
        source: Local file path or http(s)/file URL of the animation.
        output_base: Base path for outputs; defaults to ``cwd / <source stem>``.
        settings: Frame rate, repeat multiplier, scale and settle delay.
        scratch_dir: Frame directory; defaults to :func:`get_scratch_dir`.
        now: Run-start time used for the output timestamp (defaults to now).
        frame_progress: ``(completed, total)`` after each captured frame.
        encode_progress: ``(job_name, percent)`` during encoding.
        on_schedule: Called once with the frame count before capture starts.

    Returns:
        RunResult with the resolved dimensions, duration, frame count and
        output paths.

    Raises:
        SourceLoadError: The source could not be loaded or queried.
        CaptureError: A frame failed to render or save.
        EncodeError: The GIF or MP4 encode failed.
    """
    settings = settings or CaptureSettings()
    scratch_dir = scratch_dir or get_scratch_dir()
    url = resolve_source_url(source)
    if output_base is None:
        output_base = default_output_base(source, Path.cwd())
    outputs = make_output_paths(output_base, now or datetime.now())

    frames: list[Path] = []
    try:
        with RenderSession(url, device_scale_factor=settings.scale) as session:
            dimensions = resolve_dimensions(session.load())
            page = session.load(viewport=dimensions)

            duration_ms = infer_duration_ms(page, repeat=settings.repeat)
            schedule = build_schedule(duration_ms, settings.fps)
            if on_schedule is not None:
                on_schedule(schedule.frame_count)

            frames = capture_frames(
                page,
                schedule,
                scratch_dir,
                settle_ms=settings.settle_ms,
                progress_callback=frame_progress,
            )

        logger.info("MP4 output: %s", outputs.mp4)
        logger.info("GIF output: %s", outputs.gif)
        encode_outputs(
            frames,
            scratch_dir,
            dimensions,
            settings.fps,
            settings.scale,
            outputs,
            progress_callback=encode_progress,
        )
    finally:
        cleanup_artifacts(scratch_dir, frames)

    logger.info("Conversion completed successfully")
    return RunResult(
        source_url=url,
        dimensions=dimensions,
        duration_ms=duration_ms,
        frame_count=schedule.frame_count,
        outputs=outputs,
    )
