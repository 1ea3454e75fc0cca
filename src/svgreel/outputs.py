"""Timestamped output naming: ``{base_stem}_{YYYYmmddHHMMSS}.{gif,mp4}``."""
from datetime import datetime
from pathlib import Path

from svgreel.models import OutputPaths


def make_timestamp(now: datetime) -> str:
    """Compact run-start token with second resolution and no separators."""
    return now.strftime("%Y%m%d%H%M%S")


def unique_output_path(base: Path, extension: str, now: datetime) -> Path:
    """Place the output beside *base*, dropping any extension *base* carries."""
    stem = base.stem if base.suffix else base.name
    return base.parent / f"{stem}_{make_timestamp(now)}.{extension}"


def make_output_paths(base: Path, now: datetime) -> OutputPaths:
    return OutputPaths(
        gif=unique_output_path(base, "gif", now),
        mp4=unique_output_path(base, "mp4", now),
    )


def default_output_base(source: str, cwd: Path) -> Path:
    """``cwd / <source stem>``; works for local paths and URLs alike."""
    name = source.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0] or "animation"
    return cwd / Path(name).stem
