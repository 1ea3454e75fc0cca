"""FFmpeg command construction and execution for the two output profiles.

- build_gif_command(): lanczos scale + two-pass palettegen/paletteuse GIF
- build_mp4_command(): H.264 main profile, yuv420p, capped bitrate, faststart
- run_encode_job(): runs one job, streams progress, raises EncodeError on failure
"""

import logging
import re
import subprocess
import tempfile
from typing import Callable

from svgreel.config import (
    GIF_MAX_COLORS,
    MP4_BUFSIZE,
    MP4_CODEC,
    MP4_CRF,
    MP4_MAXRATE,
    MP4_PIXEL_FORMAT,
    MP4_PRESET,
    MP4_PROFILE,
    MP4_TUNE,
)
from svgreel.errors import EncodeError
from svgreel.models import EncodeJob

logger = logging.getLogger(__name__)

# `-progress pipe:1` writes key=value blocks to stdout; frame= is the counter we track.
_PROGRESS_FRAME = re.compile(r"^frame=(\d+)\s*$")


def format_rate(fps: float) -> str:
    """Render a frame rate for the command line without float noise (30.0 -> '30')."""
    return f"{fps:g}"


def _input_args(job: EncodeJob) -> list[str]:
    return [
        "ffmpeg", "-y",
        "-framerate", format_rate(job.fps),
        "-start_number", "0",
        "-i", str(job.input_pattern),
    ]


def _progress_args() -> list[str]:
    return ["-progress", "pipe:1", "-nostats"]


def gif_filter_chain(fps: float, width: int, height: int) -> str:
    """Scale, then generate a palette from the whole sequence and dither each frame against it."""
    return ";".join([
        f"fps={format_rate(fps)},scale={width}:{height}:flags=lanczos,split[s0][s1]",
        f"[s0]palettegen=max_colors={GIF_MAX_COLORS}[p]",
        "[s1][p]paletteuse=dither=floyd_steinberg",
    ])


def build_gif_command(job: EncodeJob) -> list[str]:
    width, height = job.output_size
    return [
        *_input_args(job),
        "-vf", gif_filter_chain(job.fps, width, height),
        "-loop", "0",
        *_progress_args(),
        str(job.output_path),
    ]


def build_mp4_command(job: EncodeJob) -> list[str]:
    width, height = job.output_size
    return [
        *_input_args(job),
        "-vf", f"scale={width}:{height}",
        "-c:v", MP4_CODEC,
        "-pix_fmt", MP4_PIXEL_FORMAT,
        "-profile:v", MP4_PROFILE,
        "-preset", MP4_PRESET,
        "-crf", str(MP4_CRF),
        "-tune", MP4_TUNE,
        "-maxrate", MP4_MAXRATE,
        "-bufsize", MP4_BUFSIZE,
        "-movflags", "+faststart",
        *_progress_args(),
        str(job.output_path),
    ]


def parse_progress_frame(line: str) -> int | None:
    """Return the frame counter from a ``-progress`` line, or None for other keys."""
    match = _PROGRESS_FRAME.match(line.strip())
    if match:
        return int(match.group(1))
    return None


def run_encode_job(
    job: EncodeJob,
    progress_callback: Callable[[str, float], None] | None = None,
) -> EncodeJob:
    """Run *job*'s ffmpeg command to completion.

    Emits start / progress / end as log records and, when given,
    ``progress_callback(job.name, percent)`` for every progress block.

    Args:
        job: Job with ``command`` already built.
        progress_callback: Optional callable receiving the job name and the
            percentage of input frames consumed.

    Returns:
        The same job, once its output file is written.

    Raises:
        EncodeError: If ffmpeg is missing or exits non-zero. Carries the
            command and both output streams.
    """
    cmd = job.command
    logger.info("%s: spawned FFmpeg with command: %s", job.name, " ".join(cmd))
    total = max(1, len(job.inputs))

    with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=stderr_file, text=True)
        except FileNotFoundError as exc:
            raise EncodeError(job.name, cmd, "", "ffmpeg not found. Is FFmpeg installed and in PATH?") from exc

        stdout_lines: list[str] = []
        for line in process.stdout:
            stdout_lines.append(line)
            frame = parse_progress_frame(line)
            if frame is None:
                continue
            percent = min(100.0, frame * 100.0 / total)
            logger.debug("%s processing: %.1f%% done", job.name, percent)
            if progress_callback is not None:
                progress_callback(job.name, percent)
        process.stdout.close()
        returncode = process.wait()

        stderr_file.seek(0)
        stderr = stderr_file.read()

    stdout = "".join(stdout_lines)
    if returncode != 0:
        raise EncodeError(job.name, cmd, stdout, stderr)

    logger.info("%s conversion finished: %s", job.name, job.output_path)
    return job
