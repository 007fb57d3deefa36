"""Frame preprocessing: resize, sample and cut into chunks.

The preprocessor turns a raw RGB pixel buffer into a PreparedFrame:

1. Resize so both pixel dimensions are exact multiples of the glyph cell,
   keeping the source aspect ratio as closely as the cell grid allows.
2. Compute luminance (ITU-R 601, the same weights Pillow uses for "L").
3. Subtract the brightness offset from luminance, clamped to 0..255. Colors
   are left untouched.
4. Optionally compute a Sobel gradient-magnitude map over the whole frame.
5. Cut everything into glyph-sized chunks in row-major order.

Row rounding policy: rows = floor(h * W / (w * glyph_height) + 0.5), at least
one, where W is the target pixel width and (w, h) the source size.
"""

import numpy as np
import structlog
from PIL import Image

from img2ascii.core.edges import gradient_magnitude
from img2ascii.domain import PixelChunk, PreparedFrame
from img2ascii.exceptions import UnderflowDimensionsError

logger = structlog.get_logger(__name__)

# Per-mille weights; integer sums keep pure white at exactly 255.0
LUMA_WEIGHTS = np.array([299.0, 587.0, 114.0])


def to_rgb_array(pixels: "np.ndarray | Image.Image") -> np.ndarray:
    """Normalize a pixel buffer to a uint8 array of shape (h, w, 3).

    Accepts Pillow images in any mode, grayscale arrays (h, w), and RGB or
    RGBA arrays. Alpha channels are dropped.
    """
    if isinstance(pixels, Image.Image):
        return np.asarray(pixels.convert("RGB"), dtype=np.uint8)

    array = np.asarray(pixels)
    if array.dtype != np.uint8:
        array = np.clip(np.rint(array), 0, 255).astype(np.uint8)

    if array.ndim == 2:
        return np.repeat(array[:, :, np.newaxis], 3, axis=2)
    if array.ndim == 3 and array.shape[2] in (3, 4):
        return np.ascontiguousarray(array[:, :, :3])
    raise ValueError(f"Unsupported pixel buffer shape {array.shape}")


class Preprocessor:
    """Resizes frames to the glyph grid and cuts them into chunks.

    Example:
        preprocessor = Preprocessor(glyph_width=8, glyph_height=13)
        frame = preprocessor.prepare(pixels, columns=100)
    """

    def __init__(
        self,
        glyph_width: int,
        glyph_height: int,
        brightness_offset: float = 0.0,
        edge_detection: bool = True,
    ) -> None:
        """Initialize the preprocessor.

        Args:
            glyph_width: Glyph cell width in pixels
            glyph_height: Glyph cell height in pixels
            brightness_offset: Subtracted from luminance (0-255)
            edge_detection: Compute gradient maps for chunks
        """
        if glyph_width < 1 or glyph_height < 1:
            raise ValueError(f"Invalid glyph cell {glyph_width}x{glyph_height}")
        if not 0.0 <= brightness_offset <= 255.0:
            raise ValueError(f"Brightness offset must be within 0-255, got {brightness_offset}")

        self.glyph_width = glyph_width
        self.glyph_height = glyph_height
        self.brightness_offset = float(brightness_offset)
        self.edge_detection = edge_detection

    def target_size(self, source_width: int, source_height: int, columns: int) -> tuple[int, int]:
        """Pixel size a source image is resized to.

        Args:
            source_width: Source width in pixels
            source_height: Source height in pixels
            columns: Target grid width in characters

        Returns:
            (width, height) in pixels, both multiples of the glyph cell

        Raises:
            UnderflowDimensionsError: If columns < 1 or the source is smaller
                than one glyph cell
        """
        if columns < 1:
            raise UnderflowDimensionsError(
                f"Target width of {columns} characters is smaller than one glyph"
            )
        if source_width < self.glyph_width or source_height < self.glyph_height:
            raise UnderflowDimensionsError(
                f"Source image {source_width}x{source_height} is smaller than one "
                f"glyph cell ({self.glyph_width}x{self.glyph_height})"
            )

        pixel_width = columns * self.glyph_width
        exact_rows = source_height * pixel_width / (source_width * self.glyph_height)
        rows = max(1, int(np.floor(exact_rows + 0.5)))
        return pixel_width, rows * self.glyph_height

    def prepare(self, pixels: "np.ndarray | Image.Image", columns: int) -> PreparedFrame:
        """Resize a frame and cut it into chunks.

        Args:
            pixels: Raw pixel buffer (numpy array or Pillow image)
            columns: Target grid width in characters

        Returns:
            PreparedFrame with chunks in row-major order
        """
        rgb = to_rgb_array(pixels)
        source_height, source_width = rgb.shape[:2]
        pixel_width, pixel_height = self.target_size(source_width, source_height, columns)

        if (pixel_width, pixel_height) != (source_width, source_height):
            resized = Image.fromarray(rgb).resize(
                (pixel_width, pixel_height), Image.Resampling.LANCZOS
            )
            rgb = np.asarray(resized, dtype=np.uint8)

        luminance = (rgb.astype(np.float64) @ LUMA_WEIGHTS) / 1000.0
        if self.brightness_offset:
            luminance = np.clip(luminance - self.brightness_offset, 0.0, 255.0)

        gradient = gradient_magnitude(luminance / 255.0) if self.edge_detection else None

        rows = pixel_height // self.glyph_height
        gh, gw = self.glyph_height, self.glyph_width

        lum_blocks = luminance.reshape(rows, gh, columns, gw).transpose(0, 2, 1, 3)
        color_blocks = rgb.reshape(rows, gh, columns, gw, 3).transpose(0, 2, 1, 3, 4)
        grad_blocks = (
            gradient.reshape(rows, gh, columns, gw).transpose(0, 2, 1, 3)
            if gradient is not None
            else None
        )

        chunks = tuple(
            PixelChunk(
                index=row * columns + col,
                row=row,
                column=col,
                luminance=lum_blocks[row, col],
                color=color_blocks[row, col],
                gradient=grad_blocks[row, col] if grad_blocks is not None else None,
            )
            for row in range(rows)
            for col in range(columns)
        )

        logger.debug(
            "Frame prepared",
            source=f"{source_width}x{source_height}",
            resized=f"{pixel_width}x{pixel_height}",
            grid=f"{columns}x{rows}",
        )

        return PreparedFrame(
            rows=rows,
            columns=columns,
            pixel_size=(pixel_width, pixel_height),
            chunks=chunks,
        )
