"""Encode package: GIF and MP4 ffmpeg profiles run as one fan-out/join."""
from svgreel.encode.coordinator import build_jobs, encode_outputs
from svgreel.encode.jobs import build_gif_command, build_mp4_command, run_encode_job

__all__ = [
    "build_jobs",
    "encode_outputs",
    "build_gif_command",
    "build_mp4_command",
    "run_encode_job",
]
