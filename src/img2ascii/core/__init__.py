"""Core matching engine for img2ascii.

This module contains the core algorithms for:

- Glyph featurization (GlyphSet)
- Frame preprocessing (resize, luminance, brightness offset, edge maps)
- Similarity metrics (grad, fast, dot, jaccard, occlusion, clear)
- Parallel chunk matching with deterministic reassembly
- Multi-frame rendering

All shared state is immutable once built, so a GlyphSet can be read from any
number of worker threads without locking.

Key classes:
- GlyphSet: Per-run glyph features for one metric
- Preprocessor: Turns pixel buffers into PreparedFrames
- MetricEvaluator: Scores chunks and picks the best glyph
- ChunkScheduler: Matches a frame's chunks on a thread pool
- AnimationPipeline: Renders frame sequences
- ImageConverter: End-to-end conversion with logging and output
"""

from img2ascii.core.converter import ImageConverter
from img2ascii.core.edges import gradient_magnitude
from img2ascii.core.glyphset import GlyphSet
from img2ascii.core.metrics import METRICS, MetricEvaluator, MetricStrategy, NoiseSource
from img2ascii.core.pipeline import AnimationPipeline
from img2ascii.core.preprocess import Preprocessor, to_rgb_array
from img2ascii.core.scheduler import ChunkScheduler, partition_ranges

__all__ = [
    "METRICS",
    # Pipeline classes
    "AnimationPipeline",
    "ChunkScheduler",
    "ImageConverter",
    # Matching classes
    "GlyphSet",
    "MetricEvaluator",
    "MetricStrategy",
    "NoiseSource",
    "Preprocessor",
    # Functions
    "gradient_magnitude",
    "partition_ranges",
    "to_rgb_array",
]
