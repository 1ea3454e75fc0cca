"""Named defaults and run settings.

Every fallback the pipeline relies on lives here so duration inference,
dimension resolution and encoding can be audited in one place.
"""
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

# Fallbacks used when the document carries no usable signal.
DEFAULT_DURATION_MS: float = 5000.0
DEFAULT_WIDTH: int = 1280
DEFAULT_HEIGHT: int = 720

# Iterations assumed for "indefinite" / "infinite" animations.
DEFAULT_REPEAT: int = 3

DEFAULT_FPS: float = 30.0
DEFAULT_SCALE: float = 1.0

# Fixed wait between a time seek and the screenshot, after the paint signal.
SETTLE_DELAY_MS: int = 20

# Page load timeout for goto(..., wait_until="networkidle").
LOAD_TIMEOUT_MS: int = 30_000

# Artifact naming: frame-000000.png ... matches ffmpeg's frame-%06d.png.
FRAME_PREFIX = "frame-"
FRAME_INDEX_WIDTH = 6
FRAME_SUFFIX = ".png"

# Encode jobs, in the order their failures are reported.
ENCODE_JOB_NAMES = ("gif", "mp4")

# GIF palette and MP4 rate control.
GIF_MAX_COLORS = 256
MP4_CODEC = "libx264"
MP4_PIXEL_FORMAT = "yuv420p"
MP4_PROFILE = "main"
MP4_PRESET = "medium"
MP4_CRF = 23
MP4_TUNE = "animation"
MP4_MAXRATE = "2M"
MP4_BUFSIZE = "4M"

SCRATCH_DIR_ENV = "SVGREEL_SCRATCH_DIR"


def get_scratch_dir() -> Path:
    """Return the per-process scratch directory for captured frames.

    Respects the SVGREEL_SCRATCH_DIR environment variable; falls back to
    ``<tempdir>/svgreel_frames``. The directory is not created here.
    """
    env = os.environ.get(SCRATCH_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path(tempfile.gettempdir()) / "svgreel_frames"


def frame_filename(index: int) -> str:
    return f"{FRAME_PREFIX}{index:0{FRAME_INDEX_WIDTH}d}{FRAME_SUFFIX}"


def frame_input_pattern() -> str:
    """ffmpeg image2 pattern matching :func:`frame_filename`."""
    return f"{FRAME_PREFIX}%0{FRAME_INDEX_WIDTH}d{FRAME_SUFFIX}"


class CaptureSettings(BaseModel):
    """User-tunable knobs for one run. Validated before the browser starts."""
    fps: float = Field(default=DEFAULT_FPS, gt=0.0, allow_inf_nan=False, description="Target frames per second")
    repeat: int = Field(default=DEFAULT_REPEAT, ge=1, description="Iterations assumed for indefinite animations")
    scale: float = Field(default=DEFAULT_SCALE, gt=0.0, allow_inf_nan=False, description="Device scale factor for capture and output size")
    settle_ms: int = Field(default=SETTLE_DELAY_MS, ge=0, description="Fixed wait after each time seek")
