"""Scratch-directory release after encoding, on success and on failure."""
import logging
from pathlib import Path
from typing import Iterable

from svgreel.config import FRAME_PREFIX, FRAME_SUFFIX

logger = logging.getLogger(__name__)


def cleanup_artifacts(scratch_dir: Path, frames: Iterable[Path] = ()) -> None:
    """Delete every captured frame, then the scratch directory itself.

    Deletes the listed *frames* plus any ``frame-*.png`` still present in
    *scratch_dir* (a capture that failed midway never returned its list).
    Already-missing files are ignored, so repeated calls are safe. A
    directory that cannot be removed is logged, not raised.
    """
    for frame in frames:
        frame.unlink(missing_ok=True)

    if not scratch_dir.exists():
        return

    for leftover in scratch_dir.glob(f"{FRAME_PREFIX}*{FRAME_SUFFIX}"):
        leftover.unlink(missing_ok=True)

    try:
        scratch_dir.rmdir()
    except OSError as exc:
        logger.warning("Could not remove scratch directory %s: %s", scratch_dir, exc)
        return
    logger.debug("Removed scratch directory %s", scratch_dir)
