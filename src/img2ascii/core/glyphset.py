"""Precomputed glyph features for one conversion run.

A GlyphSet restricts a font to the active alphabet and stores, as stacked
numpy matrices, every per-glyph feature the chosen metric needs. It is built
once before any chunk is matched and then shared read-only by all workers
and all frames.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from img2ascii.config import Metric
from img2ascii.core.edges import gradient_magnitude, soften
from img2ascii.domain import Alphabet, Font, Glyph
from img2ascii.exceptions import MissingGlyphError

logger = structlog.get_logger(__name__)

# Blur applied to glyph bitmaps for the grad intensity term
SOFTEN_SIGMA = 0.5


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class GlyphSet:
    """Featurized glyphs of the active alphabet, in alphabet order.

    Attributes:
        metric: Metric the features were prepared for
        glyphs: Glyphs in alphabet order
        glyph_width: Cell width in pixels
        glyph_height: Cell height in pixels
        ink: (k, n) matrix of flattened glyph bitmaps as 0.0/1.0
        ink_counts: (k,) number of ink pixels per glyph
        coverage: (k,) fraction of ink per glyph
        signed_ink: (k, n) bitmaps mapped to -1.0/+1.0 (dot metric only)
        gradients: (k, n) normalized gradient magnitudes (grad metric only)
        softened: (k, n) Gaussian-softened bitmaps (grad metric only)
    """

    metric: Metric
    glyphs: tuple[Glyph, ...]
    glyph_width: int
    glyph_height: int
    ink: np.ndarray
    ink_counts: np.ndarray
    coverage: np.ndarray
    signed_ink: np.ndarray | None = None
    gradients: np.ndarray | None = None
    softened: np.ndarray | None = None

    @classmethod
    def build(cls, font: Font, alphabet: Alphabet, metric: Metric | str) -> "GlyphSet":
        """Build the glyph set for a font, alphabet and metric.

        Args:
            font: Bitmap font supplying glyphs
            alphabet: Candidate characters, in tie-breaking order
            metric: Metric (or metric name) the features are prepared for

        Returns:
            GlyphSet instance

        Raises:
            MissingGlyphError: If an alphabet character has no glyph in the font
            InvalidMetricNameError: If the metric name is unknown
        """
        metric = Metric.parse(metric)

        missing = [char for char in alphabet if char not in font]
        if missing:
            raise MissingGlyphError(missing[0])

        glyphs = tuple(font[char] for char in alphabet)
        ink = np.stack([glyph.intensity for glyph in glyphs])
        ink_counts = ink.sum(axis=1).astype(np.int64)

        signed_ink = None
        if metric is Metric.DOT:
            signed_ink = _frozen(2.0 * ink - 1.0)

        gradients = None
        softened = None
        if metric is Metric.GRAD:
            bitmaps = [glyph.bitmap.astype(np.float64) for glyph in glyphs]
            gradients = _frozen(np.stack([gradient_magnitude(b).ravel() for b in bitmaps]))
            softened = _frozen(np.stack([soften(b, SOFTEN_SIGMA).ravel() for b in bitmaps]))

        logger.debug(
            "Glyph set built",
            font=font.name,
            metric=metric.value,
            glyphs=len(glyphs),
            cell=f"{font.glyph_width}x{font.glyph_height}",
        )

        return cls(
            metric=metric,
            glyphs=glyphs,
            glyph_width=font.glyph_width,
            glyph_height=font.glyph_height,
            ink=_frozen(ink),
            ink_counts=_frozen(ink_counts),
            coverage=_frozen(ink.mean(axis=1)),
            signed_ink=signed_ink,
            gradients=gradients,
            softened=softened,
        )

    @property
    def chars(self) -> str:
        """Characters of the glyph set, in alphabet order."""
        return "".join(glyph.char for glyph in self.glyphs)

    @property
    def pixel_count(self) -> int:
        """Pixels per glyph cell."""
        return self.glyph_width * self.glyph_height

    def __len__(self) -> int:
        return len(self.glyphs)

    def __getitem__(self, index: int) -> Glyph:
        return self.glyphs[index]

    def index_of(self, char: str) -> int:
        """Position of a character's glyph in the set."""
        return self.chars.index(char)
