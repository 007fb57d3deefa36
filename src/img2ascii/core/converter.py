"""End-to-end conversion orchestration.

This module coordinates the full workflow for one source image: resolve the
alphabet, load the font, decode frames, render them through the pipeline,
and write the output.

Key components:
- ConversionResult: Rendered sequence plus run statistics
- ImageConverter: Main orchestrator class used by the CLI
"""

import time
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from img2ascii.config import Img2AsciiSettings
from img2ascii.core.pipeline import DEFAULT_FPS, AnimationPipeline
from img2ascii.domain import Alphabet, AnimationSequence, Font
from img2ascii.exceptions import ChunkProcessingError
from img2ascii.io import ImageReader, SequenceWriter, load_font
from img2ascii.utils import ConversionLogger, ConversionStats, configure_logging


@dataclass
class ConversionResult:
    """Outcome of a conversion run.

    Attributes:
        sequence: Rendered frames
        font: Font used for matching
        stats: Timing and count statistics
        animated: Whether the source had more than one frame
        output_path: File written, or None for terminal output
    """

    sequence: AnimationSequence
    font: Font
    stats: ConversionStats
    animated: bool
    output_path: Path | None = None


class ImageConverter:
    """Orchestrates image-to-character conversion.

    Manages the complete workflow:
    1. Resolve the alphabet and load the font
    2. Build the glyph set (fails early on missing glyphs)
    3. Decode every frame of the source image
    4. Render frames through the pipeline
    5. Write the output file, if one is configured

    Example:
        settings = Img2AsciiSettings(conversion=ConversionConfig(font=Path("courier.bdf")))
        converter = ImageConverter(settings)
        result = converter.convert("cat.gif")
    """

    def __init__(self, settings: Img2AsciiSettings, quiet: bool = False) -> None:
        """Initialize the converter with configuration.

        Args:
            settings: Application settings
            quiet: Suppress console logging except errors
        """
        self.settings = settings
        self.logger = configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=quiet,
        )
        self.conversion_logger = ConversionLogger(self.logger)

    def load_font(self, alphabet: Alphabet) -> Font:
        """Load the configured font, restricted to the alphabet.

        The font is a built-in name or a path to a BDF file.

        Raises:
            FileNotFoundError: If the font file does not exist
            SyntaxError: If the file is not a BDF font
            FontLoadError: If the font has no usable glyphs
            MissingGlyphError: If no alphabet character exists in the font
        """
        font = load_font(self.settings.conversion.font, chars=alphabet)

        self.logger.info(
            "Font loaded",
            font=font.name,
            cell=f"{font.glyph_width}x{font.glyph_height}",
            glyphs=len(font),
        )
        return font

    def convert(
        self,
        source: str | Path,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ConversionResult:
        """Convert an image or animation.

        Args:
            source: Image path or http(s) URL
            progress_callback: Optional callback(completed, total) per frame

        Returns:
            ConversionResult with the rendered sequence and statistics

        Raises:
            Img2AsciiError: On configuration, font, image, or output errors
            FileNotFoundError: If the font or image file does not exist
            requests.RequestException: If downloading a URL source fails
            PIL.UnidentifiedImageError: If the image cannot be decoded
        """
        conversion = self.settings.conversion
        output = self.settings.output

        stats = self.conversion_logger.stats
        stats.start_time = time.time()

        self.conversion_logger.log_run_config(
            source=str(source),
            font=str(conversion.font),
            alphabet=conversion.alphabet,
            width=conversion.width,
            metric=conversion.metric.value,
            threads=conversion.threads,
            brightness_offset=conversion.brightness_offset,
            noise_scale=conversion.noise_scale,
            noise_seed=conversion.noise_seed,
            edge_detection=conversion.edge_detection,
            color=output.color,
            output=str(output.path) if output.path else None,
        )

        # Everything that can fail on configuration happens before decoding
        alphabet = Alphabet.resolve(conversion.alphabet)
        font = self.load_font(alphabet)
        pipeline = AnimationPipeline.from_config(font, conversion, alphabet=alphabet)

        image = ImageReader(source).load()
        fps = output.fps or image.fps or DEFAULT_FPS
        self.logger.info(
            "Image loaded",
            source=image.source,
            size=f"{image.size[0]}x{image.size[1]}",
            frames=len(image.frames),
            fps=round(fps, 2),
        )

        pixel_width, pixel_height = pipeline.validate_dimensions(image.frames, conversion.width)
        chunks_per_frame = (pixel_width // font.glyph_width) * (pixel_height // font.glyph_height)
        frame_started = time.time()

        def on_frame(completed: int, total: int) -> None:
            nonlocal frame_started
            now = time.time()
            self.conversion_logger.log_frame_complete(
                frame_index=completed - 1,
                chunk_count=chunks_per_frame,
                duration_ms=(now - frame_started) * 1000,
            )
            frame_started = now
            if progress_callback is not None:
                progress_callback(completed, total)

        try:
            sequence = pipeline.render_sequence(
                image.frames,
                columns=conversion.width,
                fps=fps,
                progress_callback=on_frame,
            )
        except ChunkProcessingError as e:
            self.conversion_logger.log_frame_error(
                frame_index=e.frame_index,
                error=e,
                traceback=traceback.format_exc(),
            )
            raise

        if output.path is not None:
            written = SequenceWriter(sequence, font, color=output.color).write(output.path)
            self.conversion_logger.log_output_written(output.path, written.value, len(sequence))

        stats.end_time = time.time()
        self.logger.info(
            "Conversion complete",
            frames=stats.frame_count,
            chunks=stats.chunk_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return ConversionResult(
            sequence=sequence,
            font=font,
            stats=stats,
            animated=image.is_animated,
            output_path=output.path,
        )
