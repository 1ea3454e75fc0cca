class SvgReelError(Exception):
    """Base class for all svgreel errors."""


class SourceLoadError(SvgReelError):
    def __init__(self, source: str, detail: str) -> None:
        super().__init__(
            f"Failed to load animation source '{source}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the path or URL reachable? Does the page settle (no endless network activity)?\n"
            f"  Tip: Run `playwright install chromium` if the browser itself failed to start."
        )
        self.source = source
        self.detail = detail


class CaptureError(SvgReelError):
    def __init__(self, frame_index: int, offset_ms: float, detail: str) -> None:
        super().__init__(
            f"Failed to capture frame {frame_index} at {offset_ms:.2f}ms.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is there free disk space in the scratch directory? Did the page crash?"
        )
        self.frame_index = frame_index
        self.offset_ms = offset_ms
        self.detail = detail


# Number of trailing characters of each ffmpeg stream shown in the message.
# The full streams stay available on the exception attributes.
_STREAM_TAIL = 1500


class EncodeError(SvgReelError):
    def __init__(self, job: str, command: list[str], stdout: str, stderr: str) -> None:
        command_line = " ".join(command)
        super().__init__(
            f"FFmpeg {job} encode failed.\n"
            f"  Command: {command_line}\n"
            f"  FFmpeg output: {stdout[-_STREAM_TAIL:].strip() or '<empty>'}\n"
            f"  FFmpeg error: {stderr[-_STREAM_TAIL:].strip() or '<empty>'}\n"
            f"  Check: Is FFmpeg installed and in PATH? Were frames written to the scratch directory?\n"
            f"  Tip: Run the FFmpeg command manually with the same arguments to see full output."
        )
        self.job = job
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
