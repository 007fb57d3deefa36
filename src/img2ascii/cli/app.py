"""CLI application entry point for img2ascii.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import requests
import typer
from PIL import UnidentifiedImageError

from img2ascii import __version__
from img2ascii.cli.output import (
    console,
    create_progress,
    play_sequence,
    print_error,
    print_frame,
    print_header,
    print_run_info,
    print_step,
    print_success,
)
from img2ascii.config import (
    DEFAULT_FONT,
    ConversionConfig,
    Img2AsciiSettings,
    LoggingConfig,
    Metric,
    OutputConfig,
)
from img2ascii.core import ImageConverter
from img2ascii.core.converter import ConversionResult
from img2ascii.exceptions import (
    FontLoadError,
    ImageLoadError,
    Img2AsciiError,
    InvalidMetricNameError,
    OutputError,
)

# Create the Typer app
app = typer.Typer(
    name="img2ascii",
    help="Render images and animations as characters from a bitmap font.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]img2ascii[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def convert(
    image: Annotated[
        str,
        typer.Argument(
            help="Path or http(s) URL of the image or animated GIF",
            show_default=False,
        ),
    ],
    alphabet: Annotated[
        str,
        typer.Option(
            "--alphabet",
            "-a",
            help="Alphabet name (alphabet|letters|lowercase|uppercase|minimal|symbols) or file",
        ),
    ] = "alphabet",
    font: Annotated[
        str,
        typer.Option(
            "--font",
            "-f",
            help="Built-in font name (fixed-6x8) or path to a BDF bitmap font",
        ),
    ] = DEFAULT_FONT,
    width: Annotated[
        int,
        typer.Option(
            "--width",
            "-w",
            help="Output width in characters",
            min=1,
        ),
    ] = 100,
    metric: Annotated[
        str,
        typer.Option(
            "--metric",
            "-m",
            help="Similarity metric (grad|fast|dot|jaccard|occlusion|clear)",
        ),
    ] = "grad",
    threads: Annotated[
        int,
        typer.Option(
            "--threads",
            "-j",
            help="Worker threads per frame",
            min=1,
        ),
    ] = 1,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Emit characters without colors",
        ),
    ] = False,
    brightness_offset: Annotated[
        float,
        typer.Option(
            "--brightness-offset",
            "-b",
            help="Subtracted from pixel luminance before matching (0-255)",
            min=0.0,
            max=255.0,
        ),
    ] = 0.0,
    noise_scale: Annotated[
        float,
        typer.Option(
            "--noise-scale",
            help="Random perturbation added to glyph scores",
            min=0.0,
        ),
    ] = 0.0,
    noise_seed: Annotated[
        int | None,
        typer.Option(
            "--noise-seed",
            help="Seed for score noise (default: random per run)",
            min=0,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file (.json, .txt, .html, .gif or an image format)",
        ),
    ] = None,
    fps: Annotated[
        float | None,
        typer.Option(
            "--fps",
            help="Animation frame rate (default: from source, else 30)",
            min=0.1,
            max=240.0,
        ),
    ] = None,
    no_edge_detection: Annotated[
        bool,
        typer.Option(
            "--no-edge-detection",
            help="Disable gradient maps for the grad metric",
        ),
    ] = False,
    loops: Annotated[
        int,
        typer.Option(
            "--loops",
            help="Terminal playback repetitions for animations (0 = forever)",
            min=0,
        ),
    ] = 1,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert an image or animation into characters from a bitmap font.

    Without --output the result is printed to the terminal; animations are
    played back at their frame rate.

    Example:
        img2ascii cat.gif --font courier.bdf --width 80 --metric jaccard
        img2ascii photo.png --width 120
    """
    try:
        metric_choice = Metric.parse(metric)
    except InvalidMetricNameError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    settings = Img2AsciiSettings(
        conversion=ConversionConfig(
            font=font,
            alphabet=alphabet,
            width=width,
            metric=metric_choice,
            brightness_offset=brightness_offset,
            noise_scale=noise_scale,
            noise_seed=noise_seed,
            edge_detection=not no_edge_detection,
            threads=threads,
        ),
        output=OutputConfig(
            path=output,
            color=not no_color,
            fps=fps,
            loops=loops,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "ERROR",
        ),
    )

    if not quiet:
        print_header(__version__)
        print_run_info(
            source=image,
            font=font,
            metric=metric_choice.value,
            width=width,
            threads=threads,
        )
        print_step("Rendering")

    try:
        converter = ImageConverter(settings, quiet=quiet)

        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task("Rendering frames", total=None)

                def update_progress(completed: int, total: int) -> None:
                    progress.update(task_id, completed=completed, total=total)

                result = converter.convert(image, progress_callback=update_progress)
        else:
            result = converter.convert(image)

    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except requests.RequestException as e:
        print_error(f"Could not download image: {e}")
        raise typer.Exit(code=1)
    except UnidentifiedImageError as e:
        print_error(f"Could not decode image: {e}")
        raise typer.Exit(code=1)
    except SyntaxError as e:
        print_error(f"Could not parse font: {e}")
        raise typer.Exit(code=1)
    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except OutputError as e:
        print_error(f"Could not write output: {e.reason}")
        raise typer.Exit(code=1)
    except Img2AsciiError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)

    _emit(result, settings, quiet)


def _emit(result: ConversionResult, settings: Img2AsciiSettings, quiet: bool) -> None:
    """Print or play the result, or summarize the written file.

    Args:
        result: Conversion result
        settings: Application settings
        quiet: Suppress the summary
    """
    sequence = result.sequence
    color = settings.output.color

    if result.output_path is not None:
        if not quiet:
            print_success(
                output_path=str(result.output_path),
                total_time_s=result.stats.duration_seconds,
                frames=len(sequence),
                columns=sequence.columns,
                rows=sequence.rows,
                avg_time_ms=result.stats.avg_frame_time_ms,
            )
        return

    if result.animated:
        try:
            play_sequence(sequence, color=color, loops=settings.output.loops)
        except KeyboardInterrupt:
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code
    else:
        print_frame(sequence.frames[0], color=color)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
