"""Multi-frame rendering pipeline.

The pipeline applies the same preprocessing and matching to every frame of a
sequence, in order, with a single GlyphSet built once for the whole run.
Frame dimensions are validated for the entire sequence before the first frame
is rendered, so a bad animation fails without producing any frames.
"""

import time
from collections.abc import Callable, Sequence

import numpy as np
import structlog
from PIL import Image

from img2ascii.config import ConversionConfig
from img2ascii.core.glyphset import GlyphSet
from img2ascii.core.metrics import NoiseSource
from img2ascii.core.preprocess import Preprocessor
from img2ascii.core.scheduler import ChunkScheduler
from img2ascii.domain import Alphabet, AnimationSequence, AsciiFrame, Font
from img2ascii.exceptions import InconsistentFrameDimensionsError

logger = structlog.get_logger(__name__)

PixelBuffer = np.ndarray | Image.Image

DEFAULT_FPS = 30.0


def source_size(pixels: PixelBuffer) -> tuple[int, int]:
    """(width, height) of a pixel buffer without decoding it further."""
    if isinstance(pixels, Image.Image):
        return pixels.size
    shape = np.shape(pixels)
    return int(shape[1]), int(shape[0])


class AnimationPipeline:
    """Renders still images and frame sequences into character grids.

    Example:
        pipeline = AnimationPipeline.from_config(font, ConversionConfig(width=80))
        sequence = pipeline.render_sequence(frames, columns=80, fps=12.0)
    """

    def __init__(
        self,
        glyphset: GlyphSet,
        preprocessor: Preprocessor,
        scheduler: ChunkScheduler,
        noise_scale: float = 0.0,
    ) -> None:
        """Initialize the pipeline.

        Args:
            glyphset: Glyph features shared by all frames
            preprocessor: Frame preprocessor matching the glyph cell
            scheduler: Chunk scheduler used for every frame
            noise_scale: Bound of the per-glyph score perturbation
        """
        if (preprocessor.glyph_width, preprocessor.glyph_height) != (
            glyphset.glyph_width,
            glyphset.glyph_height,
        ):
            raise ValueError("Preprocessor cell size does not match the glyph set")
        if noise_scale < 0:
            raise ValueError(f"Noise scale must not be negative, got {noise_scale}")

        self.glyphset = glyphset
        self.preprocessor = preprocessor
        self.scheduler = scheduler
        self.noise_scale = noise_scale

    @classmethod
    def from_config(
        cls,
        font: Font,
        config: ConversionConfig,
        alphabet: Alphabet | None = None,
    ) -> "AnimationPipeline":
        """Build a pipeline and its glyph set from configuration.

        Args:
            font: Bitmap font
            config: Conversion settings
            alphabet: Alphabet to use instead of resolving config.alphabet

        Returns:
            AnimationPipeline instance

        Raises:
            MissingGlyphError: If an alphabet character is not in the font
            UnknownAlphabetError: If config.alphabet cannot be resolved
        """
        if alphabet is None:
            alphabet = Alphabet.resolve(config.alphabet)

        glyphset = GlyphSet.build(font, alphabet, config.metric)
        preprocessor = Preprocessor(
            glyph_width=font.glyph_width,
            glyph_height=font.glyph_height,
            brightness_offset=config.brightness_offset,
            edge_detection=config.edge_detection,
        )
        scheduler = ChunkScheduler(
            thread_count=config.threads,
            noise=NoiseSource(config.noise_seed),
        )
        return cls(glyphset, preprocessor, scheduler, noise_scale=config.noise_scale)

    def validate_dimensions(self, frames: Sequence[PixelBuffer], columns: int) -> tuple[int, int]:
        """Check that every frame resizes to the same pixel dimensions.

        Args:
            frames: Source frames
            columns: Target grid width in characters

        Returns:
            Common (width, height) in pixels after resizing

        Raises:
            ValueError: If there are no frames
            UnderflowDimensionsError: If a frame is too small
            InconsistentFrameDimensionsError: If a frame differs from the first
        """
        if not frames:
            raise ValueError("No frames to render")

        expected = self.preprocessor.target_size(*source_size(frames[0]), columns)
        for idx, frame in enumerate(frames[1:], start=1):
            actual = self.preprocessor.target_size(*source_size(frame), columns)
            if actual != expected:
                raise InconsistentFrameDimensionsError(idx, expected, actual)
        return expected

    def render_frame(self, pixels: PixelBuffer, columns: int, frame_index: int = 0) -> AsciiFrame:
        """Render a single image.

        Args:
            pixels: Source pixel buffer
            columns: Target grid width in characters
            frame_index: Position of the frame in its sequence

        Returns:
            Rendered frame
        """
        prepared = self.preprocessor.prepare(pixels, columns)
        return self.scheduler.render_frame(
            prepared,
            self.glyphset,
            noise_scale=self.noise_scale,
            frame_index=frame_index,
        )

    def render_sequence(
        self,
        frames: Sequence[PixelBuffer],
        columns: int,
        fps: float = DEFAULT_FPS,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> AnimationSequence:
        """Render every frame of a sequence, in order.

        Args:
            frames: Source frames in playback order
            columns: Target grid width in characters
            fps: Playback frame rate carried into the result
            progress_callback: Optional callback(completed, total) after each frame

        Returns:
            AnimationSequence with one frame per input frame
        """
        pixel_width, pixel_height = self.validate_dimensions(frames, columns)
        rows = pixel_height // self.glyphset.glyph_height
        total = len(frames)

        logger.info(
            "Rendering sequence",
            frames=total,
            grid=f"{columns}x{rows}",
            pixels=f"{pixel_width}x{pixel_height}",
            metric=self.glyphset.metric.value,
            threads=self.scheduler.thread_count,
        )

        rendered: list[AsciiFrame] = []
        for idx, pixels in enumerate(frames):
            start_time = time.time()
            rendered.append(self.render_frame(pixels, columns, frame_index=idx))
            logger.debug(
                "Frame rendered",
                frame=idx,
                duration_ms=round((time.time() - start_time) * 1000, 2),
            )
            if progress_callback is not None:
                progress_callback(idx + 1, total)

        return AnimationSequence(
            frames=tuple(rendered),
            fps=fps,
            columns=columns,
            rows=rows,
        )
