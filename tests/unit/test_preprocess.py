"""Unit tests for frame preprocessing."""

import numpy as np
import pytest
from PIL import Image

from img2ascii.core.edges import gradient_magnitude
from img2ascii.core.preprocess import Preprocessor, to_rgb_array
from img2ascii.exceptions import UnderflowDimensionsError


@pytest.fixture
def preprocessor() -> Preprocessor:
    return Preprocessor(glyph_width=3, glyph_height=3)


class TestTargetSize:
    """Tests for the resize and row rounding policy."""

    def test_exact_multiple(self, preprocessor: Preprocessor) -> None:
        assert preprocessor.target_size(30, 30, 10) == (30, 30)

    def test_aspect_ratio(self, preprocessor: Preprocessor) -> None:
        """Test rows follow the source aspect ratio."""
        # 20 * 12 / (40 * 3) = 2 rows
        assert preprocessor.target_size(40, 20, 4) == (12, 6)

    def test_round_half_up(self) -> None:
        """Test a fractional row count of exactly .5 rounds up."""
        preprocessor = Preprocessor(glyph_width=2, glyph_height=4)
        # 6 * 6 / (6 * 4) = 1.5 rows
        assert preprocessor.target_size(6, 6, 3) == (6, 8)

    def test_round_down_below_half(self) -> None:
        preprocessor = Preprocessor(glyph_width=2, glyph_height=4)
        # 5 * 6 / (6 * 4) = 1.25 rows
        assert preprocessor.target_size(6, 5, 3) == (6, 4)

    def test_minimum_one_row(self, preprocessor: Preprocessor) -> None:
        """Test very wide images still produce one row."""
        assert preprocessor.target_size(300, 3, 1) == (3, 3)

    def test_zero_columns(self, preprocessor: Preprocessor) -> None:
        with pytest.raises(UnderflowDimensionsError):
            preprocessor.target_size(30, 30, 0)

    def test_source_smaller_than_glyph(self, preprocessor: Preprocessor) -> None:
        with pytest.raises(UnderflowDimensionsError):
            preprocessor.target_size(2, 30, 1)
        with pytest.raises(UnderflowDimensionsError):
            preprocessor.target_size(30, 2, 1)


class TestWidthBoundaries:
    """Tests for the narrowest possible target widths."""

    def test_one_column_is_one_glyph_wide(self) -> None:
        """Test a width of one glyph gives a one-character-wide grid."""
        preprocessor = Preprocessor(glyph_width=3, glyph_height=3)
        assert preprocessor.target_size(3, 6, 1) == (3, 6)

        frame = preprocessor.prepare(np.zeros((6, 3, 3), dtype=np.uint8), columns=1)
        assert frame.columns == 1
        assert frame.rows == 2

    def test_below_one_glyph_width(self) -> None:
        preprocessor = Preprocessor(glyph_width=3, glyph_height=3)
        with pytest.raises(UnderflowDimensionsError, match="smaller than one glyph"):
            preprocessor.target_size(30, 30, 0)
        with pytest.raises(UnderflowDimensionsError):
            preprocessor.prepare(np.zeros((6, 3, 3), dtype=np.uint8), columns=0)


class TestToRgbArray:
    """Tests for pixel buffer normalization."""

    def test_grayscale(self) -> None:
        rgb = to_rgb_array(np.array([[0, 128], [255, 7]], dtype=np.uint8))
        assert rgb.shape == (2, 2, 3)
        np.testing.assert_array_equal(rgb[0, 1], [128, 128, 128])

    def test_rgba_drops_alpha(self) -> None:
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        rgba[..., 0] = 10
        rgba[..., 3] = 0
        rgb = to_rgb_array(rgba)
        assert rgb.shape == (2, 2, 3)
        np.testing.assert_array_equal(rgb[1, 1], [10, 0, 0])

    def test_float_input(self) -> None:
        rgb = to_rgb_array(np.full((1, 1, 3), 300.0))
        assert rgb.dtype == np.uint8
        np.testing.assert_array_equal(rgb[0, 0], [255, 255, 255])

    def test_pillow_image(self) -> None:
        image = Image.new("L", (4, 2), color=200)
        rgb = to_rgb_array(image)
        assert rgb.shape == (2, 4, 3)
        assert int(rgb[0, 0, 0]) == 200

    def test_unsupported_shape(self) -> None:
        with pytest.raises(ValueError):
            to_rgb_array(np.zeros((2, 2, 2), dtype=np.uint8))


class TestPrepare:
    """Tests for Preprocessor.prepare."""

    def test_row_major_chunks(self, preprocessor: Preprocessor) -> None:
        """Test chunks are cut in row-major order."""
        pixels = np.zeros((6, 9, 3), dtype=np.uint8)
        # Mark the chunk at row 1, column 2
        pixels[3:6, 6:9] = 255
        frame = preprocessor.prepare(pixels, columns=3)

        assert (frame.rows, frame.columns) == (2, 3)
        assert frame.pixel_size == (9, 6)
        assert [chunk.index for chunk in frame.chunks] == list(range(6))
        assert [(c.row, c.column) for c in frame.chunks][4] == (1, 1)
        assert frame.chunks[5].luminance.shape == (3, 3)
        np.testing.assert_allclose(frame.chunks[5].luminance, 255.0)
        np.testing.assert_allclose(frame.chunks[4].luminance, 0.0)
        assert frame.chunks[5].mean_color == (255, 255, 255)

    def test_luminance_weights(self, preprocessor: Preprocessor) -> None:
        pixels = np.zeros((3, 3, 3), dtype=np.uint8)
        pixels[..., 0] = 255
        frame = preprocessor.prepare(pixels, columns=1)
        np.testing.assert_allclose(frame.chunks[0].luminance, 255 * 0.299)

    def test_pure_white_is_blank(self, preprocessor: Preprocessor) -> None:
        frame = preprocessor.prepare(np.full((3, 3, 3), 255, dtype=np.uint8), columns=1)
        np.testing.assert_array_equal(frame.chunks[0].darkness, np.zeros(9))

    def test_resize(self, preprocessor: Preprocessor) -> None:
        """Test sources are resized to the glyph grid."""
        pixels = np.full((60, 60, 3), 90, dtype=np.uint8)
        frame = preprocessor.prepare(pixels, columns=10)
        assert (frame.rows, frame.columns) == (10, 10)
        assert frame.pixel_size == (30, 30)
        assert len(frame) == 100
        np.testing.assert_allclose(frame.chunks[55].luminance, 90.0, atol=1.0)

    def test_brightness_offset(self) -> None:
        """Test the offset darkens luminance but not color."""
        preprocessor = Preprocessor(glyph_width=3, glyph_height=3, brightness_offset=55)
        pixels = np.zeros((3, 6, 3), dtype=np.uint8)
        pixels[:, 3:] = 255
        frame = preprocessor.prepare(pixels, columns=2)

        np.testing.assert_allclose(frame.chunks[0].luminance, 0.0)
        np.testing.assert_allclose(frame.chunks[1].luminance, 200.0)
        assert frame.chunks[1].mean_color == (255, 255, 255)

    def test_invalid_brightness_offset(self) -> None:
        with pytest.raises(ValueError):
            Preprocessor(glyph_width=3, glyph_height=3, brightness_offset=300)

    def test_invalid_cell(self) -> None:
        with pytest.raises(ValueError):
            Preprocessor(glyph_width=0, glyph_height=3)

    def test_edge_detection_disabled(self) -> None:
        preprocessor = Preprocessor(glyph_width=3, glyph_height=3, edge_detection=False)
        frame = preprocessor.prepare(np.zeros((3, 3, 3), dtype=np.uint8), columns=1)
        assert frame.chunks[0].gradient is None
        assert frame.chunks[0].edges is None

    def test_edge_detection_enabled(self, preprocessor: Preprocessor) -> None:
        """Test gradient maps mark the boundary between dark and light."""
        pixels = np.zeros((3, 6, 3), dtype=np.uint8)
        pixels[:, 3:] = 255
        frame = preprocessor.prepare(pixels, columns=2)

        gradient = frame.chunks[0].gradient
        assert gradient is not None
        assert gradient.shape == (3, 3)
        assert gradient[:, 2].min() > 0.0
        np.testing.assert_array_equal(gradient[:, 0], 0.0)


class TestGradientMagnitude:
    """Tests for the Sobel edge helper."""

    def test_flat_input(self) -> None:
        np.testing.assert_array_equal(gradient_magnitude(np.full((4, 4), 0.5)), 0.0)

    def test_normalized_range(self) -> None:
        values = np.zeros((5, 5))
        values[:, 2:] = 1.0
        magnitude = gradient_magnitude(values)
        assert magnitude.max() <= 1.0
        assert magnitude.max() > 0.5
