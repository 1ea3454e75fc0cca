import math
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Dimensions:
    """Intrinsic pixel size of the animated graphic. Both fields are > 0."""

    width: float
    height: float

    def viewport(self) -> dict[str, int]:
        """Rendering-surface size (CSS pixels), rounded up."""
        return {"width": math.ceil(self.width), "height": math.ceil(self.height)}

    def scaled(self, scale: float) -> tuple[int, int]:
        """Output pixel size at *scale*, rounded up."""
        return math.ceil(self.width * scale), math.ceil(self.height * scale)

    def scaled_even(self, scale: float) -> tuple[int, int]:
        """Like :meth:`scaled` but rounded up to even numbers (yuv420p needs them)."""
        width, height = self.scaled(scale)
        return width + width % 2, height + height % 2


@dataclass(frozen=True)
class FrameSchedule:
    """Absolute animation-time offsets, one per output frame."""

    duration_ms: float
    fps: float
    offsets: tuple[float, ...]

    @property
    def frame_count(self) -> int:
        return len(self.offsets)

    @property
    def interval_ms(self) -> float:
        return self.duration_ms / self.frame_count


@dataclass
class EncodeJob:
    """One ffmpeg invocation over the shared frame sequence."""

    name: str               # "gif" | "mp4"
    inputs: list[Path]      # Ordered artifacts; ffmpeg reads them through input_pattern
    input_pattern: Path     # e.g. <scratch>/frame-%06d.png
    fps: float              # Nominal input rate
    output_path: Path
    output_size: tuple[int, int]
    command: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OutputPaths:
    gif: Path
    mp4: Path


@dataclass
class RunResult:
    """What one completed run produced."""

    source_url: str
    dimensions: Dimensions
    duration_ms: float
    frame_count: int
    outputs: OutputPaths
