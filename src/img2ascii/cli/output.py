"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages. Status messages go to stderr so
that rendered frames on stdout can be piped or redirected cleanly.
"""

import sys
import time

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from img2ascii.domain import AnimationSequence, AsciiFrame
from img2ascii.io import frame_to_ansi

console = Console(stderr=True)

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info

CLEAR_SCREEN = "\x1b[2J\x1b[H"


def create_progress() -> Progress:
    """Create a rich progress bar for frame rendering.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]img2ascii[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_run_info(source: str, font: str, metric: str, width: int, threads: int) -> None:
    """Print the conversion setup.

    Args:
        source: Image path or URL
        font: Font path
        metric: Metric name
        width: Output width in characters
        threads: Worker thread count
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(source)
    console.print(line)
    font_line = Text("  ")
    font_line.append(font)
    console.print(font_line)
    console.print(f"  {metric} {SYM_DOT} {width} columns {SYM_DOT} {threads} threads")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    total_time_s: float,
    frames: int,
    columns: int,
    rows: int,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        total_time_s: Total conversion time in seconds
        frames: Number of frames rendered
        columns: Grid width in characters
        rows: Grid height in characters
        avg_time_ms: Average rendering time per frame in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    plural = "frame" if frames == 1 else "frames"
    console.print(f"  {frames} {plural} {SYM_DOT} {columns}x{rows} characters")

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg per frame")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_frame(frame: AsciiFrame, color: bool) -> None:
    """Write one rendered frame to stdout."""
    sys.stdout.write(frame_to_ansi(frame, color=color) + "\n")
    sys.stdout.flush()


def play_sequence(sequence: AnimationSequence, color: bool, loops: int = 1) -> None:
    """Play an animation in the terminal at the sequence frame rate.

    Args:
        sequence: Rendered frames
        color: Emit ANSI colors
        loops: Number of repetitions (0 = until interrupted)
    """
    rendered = [frame_to_ansi(frame, color=color) for frame in sequence.frames]
    played = 0
    while loops == 0 or played < loops:
        for text in rendered:
            started = time.monotonic()
            sys.stdout.write(CLEAR_SCREEN + text + "\n")
            sys.stdout.flush()
            delay = sequence.frame_duration - (time.monotonic() - started)
            if delay > 0:
                time.sleep(delay)
        played += 1
