"""Fan-out/join over the GIF and MP4 encode jobs."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from svgreel.config import frame_input_pattern
from svgreel.encode.jobs import build_gif_command, build_mp4_command, run_encode_job
from svgreel.models import Dimensions, EncodeJob, OutputPaths

logger = logging.getLogger(__name__)


def build_jobs(
    frames: list[Path],
    scratch_dir: Path,
    dimensions: Dimensions,
    fps: float,
    scale: float,
    outputs: OutputPaths,
) -> list[EncodeJob]:
    """Both jobs read the same frames at the same rate; only the filter chain differs."""
    pattern = scratch_dir / frame_input_pattern()

    gif = EncodeJob(
        name="gif",
        inputs=list(frames),
        input_pattern=pattern,
        fps=fps,
        output_path=outputs.gif,
        output_size=dimensions.scaled(scale),
    )
    gif.command = build_gif_command(gif)

    mp4 = EncodeJob(
        name="mp4",
        inputs=list(frames),
        input_pattern=pattern,
        fps=fps,
        output_path=outputs.mp4,
        output_size=dimensions.scaled_even(scale),
    )
    mp4.command = build_mp4_command(mp4)

    return [gif, mp4]


def encode_outputs(
    frames: list[Path],
    scratch_dir: Path,
    dimensions: Dimensions,
    fps: float,
    scale: float,
    outputs: OutputPaths,
    progress_callback: Callable[[str, float], None] | None = None,
) -> OutputPaths:
    """Run the GIF and MP4 encodes concurrently and return once both have settled.

    A failing job does not cancel the other. Every failure is logged; the
    first one in job order (gif, mp4) is re-raised after both finish.

    Raises:
        EncodeError: If either job fails.
    """
    if not frames:
        raise ValueError("encode_outputs() needs at least one captured frame")

    jobs = build_jobs(frames, scratch_dir, dimensions, fps, scale, outputs)
    logger.info("Generating %s outputs from %d frames", " and ".join(j.name.upper() for j in jobs), len(frames))

    with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="svgreel-encode") as pool:
        futures = [(job, pool.submit(run_encode_job, job, progress_callback)) for job in jobs]

    failures: list[BaseException] = []
    for job, future in futures:
        exc = future.exception()
        if exc is not None:
            logger.error("%s encode failed: %s", job.name, exc)
            failures.append(exc)

    if failures:
        raise failures[0]
    return outputs
