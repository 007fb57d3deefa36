"""Unit tests for GlyphSet construction."""

import numpy as np
import pytest

from img2ascii.config import Metric
from img2ascii.core.glyphset import GlyphSet
from img2ascii.domain import Alphabet, Font
from img2ascii.exceptions import InvalidMetricNameError, MissingGlyphError


class TestGlyphSetBuild:
    """Tests for GlyphSet.build."""

    def test_alphabet_order(self, font: Font) -> None:
        """Test glyphs follow the alphabet, not the font."""
        glyphset = GlyphSet.build(font, Alphabet.from_string("#. "), Metric.FAST)
        assert glyphset.chars == "#. "
        assert len(glyphset) == 3
        assert glyphset[0].char == "#"
        assert glyphset.index_of(" ") == 2

    def test_features(self, font: Font) -> None:
        glyphset = GlyphSet.build(font, Alphabet.from_string(" .#"), Metric.FAST)
        assert glyphset.ink.shape == (3, 9)
        np.testing.assert_array_equal(glyphset.ink_counts, [0, 1, 9])
        np.testing.assert_allclose(glyphset.coverage, [0.0, 1 / 9, 1.0])
        assert glyphset.pixel_count == 9
        assert (glyphset.glyph_width, glyphset.glyph_height) == (3, 3)

    def test_arrays_read_only(self, font: Font, alphabet: Alphabet) -> None:
        """Test shared features cannot be mutated by workers."""
        glyphset = GlyphSet.build(font, alphabet, Metric.GRAD)
        features = (
            glyphset.ink,
            glyphset.ink_counts,
            glyphset.coverage,
            glyphset.gradients,
            glyphset.softened,
        )
        for array in features:
            assert array is not None
            with pytest.raises(ValueError):
                array[0] = 0

    def test_signed_ink_only_for_dot(self, font: Font, alphabet: Alphabet) -> None:
        dot = GlyphSet.build(font, alphabet, Metric.DOT)
        assert dot.signed_ink is not None
        np.testing.assert_array_equal(dot.signed_ink, 2.0 * dot.ink - 1.0)
        assert GlyphSet.build(font, alphabet, Metric.JACCARD).signed_ink is None

    def test_gradients_only_for_grad(self, font: Font, alphabet: Alphabet) -> None:
        grad = GlyphSet.build(font, alphabet, Metric.GRAD)
        assert grad.gradients is not None
        assert grad.gradients.shape == (len(alphabet), 9)
        assert grad.gradients.min() >= 0.0
        assert grad.gradients.max() <= 1.0
        # Blank and solid glyphs have no edges
        np.testing.assert_array_equal(grad.gradients[grad.index_of(" ")], np.zeros(9))
        np.testing.assert_array_equal(grad.gradients[grad.index_of("#")], np.zeros(9))
        assert GlyphSet.build(font, alphabet, Metric.DOT).gradients is None

    def test_softened_only_for_grad(self, font: Font, alphabet: Alphabet) -> None:
        """Test softened bitmaps keep solid glyphs solid and spread thin strokes."""
        grad = GlyphSet.build(font, alphabet, Metric.GRAD)
        assert grad.softened is not None
        np.testing.assert_allclose(grad.softened[grad.index_of("#")], np.ones(9))
        np.testing.assert_allclose(grad.softened[grad.index_of(" ")], np.zeros(9))

        dot = grad.softened[grad.index_of(".")].reshape(3, 3)
        assert 0.5 < dot[1, 1] < 1.0
        assert 0.0 < dot[0, 1] < dot[1, 1]
        assert GlyphSet.build(font, alphabet, Metric.CLEAR).softened is None

    def test_metric_by_name(self, font: Font, alphabet: Alphabet) -> None:
        assert GlyphSet.build(font, alphabet, "Jaccard").metric is Metric.JACCARD

    def test_invalid_metric_name(self, font: Font, alphabet: Alphabet) -> None:
        with pytest.raises(InvalidMetricNameError) as exc_info:
            GlyphSet.build(font, alphabet, "cosine")
        assert exc_info.value.name == "cosine"
        assert "jaccard" in exc_info.value.valid

    def test_missing_glyph(self, font: Font) -> None:
        """Test an alphabet character absent from the font fails the build."""
        with pytest.raises(MissingGlyphError) as exc_info:
            GlyphSet.build(font, Alphabet.from_string(" .@#"), Metric.FAST)
        assert exc_info.value.char == "@"
