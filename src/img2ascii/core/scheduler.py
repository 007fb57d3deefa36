"""Parallel chunk matching for a single frame.

This module fans the chunks of one frame out over a bounded thread pool and
folds the results back into a grid in the original chunk order.

Key components:
- partition_ranges: Split n items into contiguous, near-equal ranges
- ChunkScheduler: Renders a PreparedFrame into an AsciiFrame
"""

import traceback
from concurrent.futures import ThreadPoolExecutor, as_completed

import structlog

from img2ascii.core.glyphset import GlyphSet
from img2ascii.core.metrics import MetricEvaluator, NoiseSource
from img2ascii.domain import AsciiFrame, ChunkResult, PixelChunk, PreparedFrame
from img2ascii.exceptions import ChunkProcessingError

logger = structlog.get_logger(__name__)


def partition_ranges(count: int, parts: int) -> list[range]:
    """Split count items into at most parts contiguous ranges.

    Range sizes differ by at most one, larger ranges first. Empty ranges are
    never returned.

    Example:
        partition_ranges(10, 3) -> [range(0, 4), range(4, 7), range(7, 10)]
    """
    if parts < 1:
        raise ValueError(f"Partition count must be at least 1, got {parts}")

    parts = min(parts, count)
    if parts == 0:
        return []

    base, extra = divmod(count, parts)
    ranges: list[range] = []
    start = 0
    for idx in range(parts):
        size = base + (1 if idx < extra else 0)
        ranges.append(range(start, start + size))
        start += size
    return ranges


def match_partition(
    evaluator: MetricEvaluator,
    chunks: tuple[PixelChunk, ...],
    glyphset: GlyphSet,
    noise_scale: float,
    noise: NoiseSource,
    frame_index: int,
) -> list[ChunkResult]:
    """Match one contiguous partition of chunks.

    Runs inside a worker thread; it reads only its own chunks and the shared
    read-only glyph set.
    """
    return evaluator.match_chunks(
        chunks,
        glyphset,
        noise_scale=noise_scale,
        noise=noise,
        frame_index=frame_index,
    )


class ChunkScheduler:
    """Renders frames by matching chunks on a pool of worker threads.

    The pool lives only for one render_frame call. Results are written into
    one slot per partition and the grid is assembled after every worker has
    finished, so the output order never depends on completion order.

    Example:
        scheduler = ChunkScheduler(thread_count=4, noise=NoiseSource(seed=7))
        frame = scheduler.render_frame(prepared, glyphset, noise_scale=0.05)
    """

    def __init__(self, thread_count: int = 1, noise: NoiseSource | None = None) -> None:
        """Initialize the scheduler.

        Args:
            thread_count: Worker threads per frame (1 = run inline)
            noise: Noise source shared by all frames of a run
        """
        if thread_count < 1:
            raise ValueError(f"Thread count must be at least 1, got {thread_count}")
        self.thread_count = thread_count
        self.noise = noise if noise is not None else NoiseSource()

    def render_frame(
        self,
        frame: PreparedFrame,
        glyphset: GlyphSet,
        noise_scale: float = 0.0,
        frame_index: int = 0,
    ) -> AsciiFrame:
        """Match every chunk of a frame and assemble the character grid.

        Args:
            frame: Preprocessed frame
            glyphset: Shared glyph features
            noise_scale: Bound of the per-glyph score perturbation
            frame_index: Position of the frame in its sequence

        Returns:
            AsciiFrame in row-major chunk order

        Raises:
            ChunkProcessingError: If any worker fails
        """
        evaluator = MetricEvaluator(glyphset.metric)
        ranges = partition_ranges(len(frame.chunks), self.thread_count)

        if len(ranges) <= 1:
            try:
                results = match_partition(
                    evaluator, frame.chunks, glyphset, noise_scale, self.noise, frame_index
                )
            except Exception as e:
                raise ChunkProcessingError(frame_index, str(e)) from e
            return AsciiFrame.from_results(results, frame.columns)

        slots: list[list[ChunkResult] | None] = [None] * len(ranges)

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = {
                executor.submit(
                    match_partition,
                    evaluator,
                    frame.chunks[part.start : part.stop],
                    glyphset,
                    noise_scale,
                    self.noise,
                    frame_index,
                ): slot
                for slot, part in enumerate(ranges)
            }

            for future in as_completed(futures):
                slot = futures[future]
                try:
                    slots[slot] = future.result()
                except Exception as e:
                    logger.error(
                        "Chunk partition failed",
                        frame=frame_index,
                        partition=slot,
                        error=str(e),
                        traceback=traceback.format_exc(),
                    )
                    for pending in futures:
                        pending.cancel()
                    raise ChunkProcessingError(frame_index, str(e)) from e

        results: list[ChunkResult] = []
        for slot_results in slots:
            if slot_results is None:
                raise ChunkProcessingError(frame_index, "partition produced no results")
            results.extend(slot_results)

        return AsciiFrame.from_results(results, frame.columns)
