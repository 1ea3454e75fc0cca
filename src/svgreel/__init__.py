"""svgreel: deterministic frame capture of animated SVG into GIF and MP4."""

__version__ = "0.1.0"
