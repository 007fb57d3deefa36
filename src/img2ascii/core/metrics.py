"""Chunk-to-glyph similarity metrics.

Every metric scores a batch of chunks against every glyph of a GlyphSet at
once and returns an (m, k) matrix for m chunks and k glyphs. Chunks are
compared through their darkness vector d (0.0 white, 1.0 black) and glyphs
through their ink vector g (1.0 where the glyph has ink), so a black chunk
resembles a dense glyph.

Metrics, with n pixels per cell and |g| the ink count of a glyph:
- grad: mean((d - s)^2) + mean((e - e_g)^2), where s is the glyph softened
  with a small Gaussian, e the chunk gradient map and e_g the glyph gradient
  map; the gradient term is dropped without edge detection (lower is better)
- fast: |mean(d) - coverage| (lower is better)
- dot: (2d - 1) . (2g - 1), the signed dot product (higher is better)
- jaccard: weighted Jaccard index sum(min(d, g)) / sum(max(d, g)); a blank
  chunk and a blank glyph score 1 (higher is better)
- occlusion: share of the chunk's dark mass covered by ink, d . g / sum(d),
  minus the share of the cell where ink lands on light pixels,
  (|g| - d . g) / n. Swapping chunk and glyph changes the score (higher is
  better)
- clear: squared residual darkness left uncovered by the glyph,
  sum(((d - g)+)^2), plus half the ink laid over light pixels,
  0.5 * sum((g - d)+) (lower is better)

Glyph bitmaps are binary, so min/max and positive-part terms reduce to
matrix products against the ink matrix and never need an (m, k, n) tensor.
The per-pixel weight each metric gives to a glyph's ink differs in shape,
so no two metrics rank glyphs the same way.

Ties are broken by alphabet order: argmin/argmax return the first best glyph.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar

import numpy as np

from img2ascii.config import Metric
from img2ascii.core.glyphset import GlyphSet
from img2ascii.domain import Alphabet, ChunkResult, Font, Glyph, PixelChunk


class NoiseSource:
    """Deterministic per-evaluation score noise.

    Each (frame, chunk) pair gets its own generator seeded from the run seed
    and the two indices, so workers never share random state and the noise a
    chunk receives does not depend on which thread evaluates it.

    Attributes:
        seed: Run seed (random when not given)
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int(np.random.SeedSequence().generate_state(1, dtype=np.uint64)[0])
        self.seed = seed

    def perturbation(
        self,
        frame_index: int,
        chunk_index: int,
        count: int,
        scale: float,
    ) -> np.ndarray:
        """Uniform noise in [-scale, scale] for each of count glyphs."""
        rng = np.random.default_rng([self.seed, frame_index, chunk_index])
        return rng.uniform(-scale, scale, size=count)


class MetricStrategy(ABC):
    """Scoring formula shared by all chunks of a run."""

    metric: ClassVar[Metric]
    higher_is_better: ClassVar[bool]

    @abstractmethod
    def score_matrix(
        self,
        darkness: np.ndarray,
        edges: np.ndarray | None,
        glyphset: GlyphSet,
    ) -> np.ndarray:
        """Score chunks against all glyphs.

        Args:
            darkness: (m, n) chunk darkness vectors
            edges: (m, n) chunk gradient magnitudes, or None
            glyphset: Glyph features

        Returns:
            (m, k) score matrix
        """

    def select(self, scores: np.ndarray) -> np.ndarray:
        """Index of the best glyph for each row of a score matrix."""
        if self.higher_is_better:
            return np.argmax(scores, axis=1)
        return np.argmin(scores, axis=1)


class FastMetric(MetricStrategy):
    metric = Metric.FAST
    higher_is_better = False

    def score_matrix(self, darkness, edges, glyphset):
        return np.abs(darkness.mean(axis=1)[:, np.newaxis] - glyphset.coverage[np.newaxis, :])


class DotMetric(MetricStrategy):
    metric = Metric.DOT
    higher_is_better = True

    def score_matrix(self, darkness, edges, glyphset):
        signed_ink = glyphset.signed_ink
        if signed_ink is None:
            signed_ink = 2.0 * glyphset.ink - 1.0
        return (2.0 * darkness - 1.0) @ signed_ink.T


class JaccardMetric(MetricStrategy):
    metric = Metric.JACCARD
    higher_is_better = True

    def score_matrix(self, darkness, edges, glyphset):
        # min(d, g) = d * g and max(d, g) = g + d * (1 - g) for binary g
        intersection = darkness @ glyphset.ink.T
        union = glyphset.ink_counts[np.newaxis, :] + darkness @ (1.0 - glyphset.ink).T
        scores = np.ones_like(intersection)
        np.divide(intersection, union, out=scores, where=union > 0)
        return scores


class OcclusionMetric(MetricStrategy):
    metric = Metric.OCCLUSION
    higher_is_better = True

    def score_matrix(self, darkness, edges, glyphset):
        overlap = darkness @ glyphset.ink.T
        mass = darkness.sum(axis=1)[:, np.newaxis]
        covered = np.zeros_like(overlap)
        np.divide(overlap, mass, out=covered, where=mass > 0)
        stray = (glyphset.ink_counts[np.newaxis, :] - overlap) / glyphset.pixel_count
        return covered - stray


class ClearMetric(MetricStrategy):
    metric = Metric.CLEAR
    higher_is_better = False

    # Weight of ink laid over light pixels relative to uncovered darkness
    EXCESS_WEIGHT: ClassVar[float] = 0.5

    def score_matrix(self, darkness, edges, glyphset):
        # (d - g)+ = d * (1 - g) and (g - d)+ = g * (1 - d) for binary g
        squared = darkness**2
        residual = squared.sum(axis=1)[:, np.newaxis] - squared @ glyphset.ink.T
        excess = glyphset.ink_counts[np.newaxis, :] - darkness @ glyphset.ink.T
        return residual + self.EXCESS_WEIGHT * excess


class GradMetric(MetricStrategy):
    metric = Metric.GRAD
    higher_is_better = False

    @staticmethod
    def _squared_error(values: np.ndarray, targets: np.ndarray) -> np.ndarray:
        return (
            (values**2).sum(axis=1)[:, np.newaxis]
            - 2.0 * (values @ targets.T)
            + (targets**2).sum(axis=1)[np.newaxis, :]
        )

    def score_matrix(self, darkness, edges, glyphset):
        n = glyphset.pixel_count
        softened = glyphset.softened
        if softened is None:
            softened = glyphset.ink
        intensity = self._squared_error(darkness, softened) / n
        if edges is None or glyphset.gradients is None:
            return intensity
        return intensity + self._squared_error(edges, glyphset.gradients) / n


METRICS: dict[Metric, MetricStrategy] = {
    strategy.metric: strategy
    for strategy in (
        GradMetric(),
        FastMetric(),
        DotMetric(),
        JaccardMetric(),
        OcclusionMetric(),
        ClearMetric(),
    )
}


class MetricEvaluator:
    """Matches chunks to glyphs under one metric.

    Example:
        glyphset = GlyphSet.build(font, alphabet, Metric.JACCARD)
        evaluator = MetricEvaluator(glyphset.metric)
        result = evaluator.best_match(chunk, glyphset)
    """

    def __init__(self, metric: Metric | str) -> None:
        """Initialize the evaluator.

        Args:
            metric: Metric or metric name

        Raises:
            InvalidMetricNameError: If the metric name is unknown
        """
        self.metric = Metric.parse(metric)
        self.strategy = METRICS[self.metric]

    @property
    def higher_is_better(self) -> bool:
        """Whether larger scores mean closer matches."""
        return self.strategy.higher_is_better

    def score(self, chunk: PixelChunk, glyph: Glyph) -> float:
        """Score a single chunk against a single glyph."""
        single = GlyphSet.build(
            Font(glyphs={glyph.char: glyph}),
            Alphabet(chars=(glyph.char,)),
            self.metric,
        )
        return float(self.score_chunks([chunk], single)[0, 0])

    def score_chunks(self, chunks: Sequence[PixelChunk], glyphset: GlyphSet) -> np.ndarray:
        """Score chunks against every glyph of a glyph set.

        Returns:
            (len(chunks), len(glyphset)) score matrix

        Raises:
            ValueError: If the glyph set was built for another metric or the
                chunk size does not match the glyph cell
        """
        if glyphset.metric is not self.metric:
            raise ValueError(
                f"Glyph set was built for '{glyphset.metric.value}', "
                f"evaluator uses '{self.metric.value}'"
            )

        darkness = np.stack([chunk.darkness for chunk in chunks])
        if darkness.shape[1] != glyphset.pixel_count:
            raise ValueError(
                f"Chunk has {darkness.shape[1]} pixels, glyph cell has {glyphset.pixel_count}"
            )

        edges = None
        if all(chunk.gradient is not None for chunk in chunks):
            edges = np.stack([chunk.edges for chunk in chunks])

        return self.strategy.score_matrix(darkness, edges, glyphset)

    def match_chunks(
        self,
        chunks: Sequence[PixelChunk],
        glyphset: GlyphSet,
        noise_scale: float = 0.0,
        noise: NoiseSource | None = None,
        frame_index: int = 0,
    ) -> list[ChunkResult]:
        """Pick the best glyph for each chunk.

        Args:
            chunks: Chunks to match
            glyphset: Candidate glyph features
            noise_scale: Bound of the per-glyph score perturbation (0 = none)
            noise: Noise source (a fresh random one if None)
            frame_index: Frame the chunks belong to, for noise seeding

        Returns:
            One ChunkResult per chunk, in input order
        """
        if not chunks:
            return []

        scores = self.score_chunks(chunks, glyphset)

        if noise_scale > 0:
            if noise is None:
                noise = NoiseSource()
            scores = scores + np.stack(
                [
                    noise.perturbation(frame_index, chunk.index, len(glyphset), noise_scale)
                    for chunk in chunks
                ]
            )

        winners = self.strategy.select(scores)
        return [
            ChunkResult(char=glyphset.glyphs[winner].char, color=chunk.mean_color)
            for chunk, winner in zip(chunks, winners, strict=True)
        ]

    def best_match(
        self,
        chunk: PixelChunk,
        glyphset: GlyphSet,
        noise_scale: float = 0.0,
        noise: NoiseSource | None = None,
        frame_index: int = 0,
    ) -> ChunkResult:
        """Pick the best glyph for one chunk."""
        return self.match_chunks([chunk], glyphset, noise_scale, noise, frame_index)[0]
