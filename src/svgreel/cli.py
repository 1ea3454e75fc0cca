"""svgreel CLI entry point.

Wires the capture pipeline (dimension probe, duration inference, frame
capture, GIF + MP4 encode, scratch cleanup) behind a single ``svgreel``
command with Rich progress bars and human-readable error panels.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from svgreel.config import (
    DEFAULT_FPS,
    DEFAULT_REPEAT,
    DEFAULT_SCALE,
    ENCODE_JOB_NAMES,
    SETTLE_DELAY_MS,
    CaptureSettings,
)
from svgreel.errors import SvgReelError
from svgreel.pipeline import render_animation
from svgreel.render.session import is_url

app = typer.Typer(
    name="svgreel",
    help="svgreel — Render an animated SVG into a looping GIF and an MP4, frame by frame.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _input_error(message: str) -> None:
    err_console.print(Panel(message, title="[red]Input Error[/red]", border_style="red"))
    raise typer.Exit(1)


@app.command()
def main(
    source: Annotated[
        str,
        typer.Argument(help="Animated SVG (or HTML page) as a local path or an http(s)/file URL."),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output", "-o",
            dir_okay=False,
            resolve_path=True,
            help="Output base path; a timestamp and .gif/.mp4 are appended (default: ./<source name>).",
        ),
    ] = None,
    fps: Annotated[
        float,
        typer.Option("--fps", "-f", help="Frames per second for capture and both outputs."),
    ] = DEFAULT_FPS,
    repeat: Annotated[
        int,
        typer.Option("--repeat", "-r", help="Iterations assumed for indefinitely repeating animations."),
    ] = DEFAULT_REPEAT,
    scale: Annotated[
        float,
        typer.Option("--scale", "-s", help="Device scale factor (2 doubles the output resolution)."),
    ] = DEFAULT_SCALE,
    settle_ms: Annotated[
        int,
        typer.Option("--settle-ms", help="Extra wait after each time seek before the screenshot."),
    ] = SETTLE_DELAY_MS,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging (per-frame and FFmpeg progress)."),
    ] = False,
) -> None:
    """Capture an animation at exact time offsets and encode it as GIF and MP4."""
    _configure_logging(verbose)

    # --- Input validation ---
    if not is_url(source) and not Path(source).expanduser().is_file():
        _input_error(
            f"File not found: [bold]{source}[/bold]\n"
            f"Pass an existing file or an http(s)/file URL."
        )

    try:
        settings = CaptureSettings(fps=fps, repeat=repeat, scale=scale, settle_ms=settle_ms)
    except ValidationError as e:
        field_errors = "\n".join(
            f"{' -> '.join(str(x) for x in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        _input_error(f"Invalid options:\n{field_errors}")

    console.print(f"\n[bold cyan]svgreel[/bold cyan] — [dim]{source}[/dim]  fps=[bold]{settings.fps:g}[/bold]\n")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            capture_task = progress.add_task("Loading source...", total=None)
            # Filled before the encode workers start; they only read it.
            encode_tasks: dict[str, TaskID] = {}

            def _on_schedule(total: int) -> None:
                progress.update(capture_task, description=f"Capturing {total} frames...", total=total)
                for job in ENCODE_JOB_NAMES:
                    encode_tasks[job] = progress.add_task(f"Encoding {job.upper()}...", total=100, visible=False)

            def _frame_progress(completed: int, total: int) -> None:
                progress.update(capture_task, completed=completed)

            def _encode_progress(job: str, percent: float) -> None:
                # Called from the encode worker threads; Progress.update takes its own lock.
                progress.update(encode_tasks[job], completed=percent, visible=True)

            result = render_animation(
                source,
                output_base=output,
                settings=settings,
                frame_progress=_frame_progress,
                encode_progress=_encode_progress,
                on_schedule=_on_schedule,
            )
    except SvgReelError as e:
        # Translate all typed pipeline errors to a Rich panel; never show tracebacks.
        err_console.print(Panel(
            str(e),
            title="[red]Pipeline Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold green]Conversion complete[/bold green]\n\n"
        f"  Dimensions: {result.dimensions.width:g}x{result.dimensions.height:g}\n"
        f"  Duration:   {result.duration_ms:.0f}ms\n"
        f"  Frames:     {result.frame_count}\n"
        f"  GIF:        [dim]{result.outputs.gif}[/dim]\n"
        f"  MP4:        [dim]{result.outputs.mp4}[/dim]",
        title="[green]Outputs Ready[/green]",
        border_style="green",
    ))
