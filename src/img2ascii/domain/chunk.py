"""Pixel chunks and their matching results.

A chunk is the glyph-sized block of source pixels that one output character
replaces. The preprocessor cuts frames into chunks; the metric evaluator turns
each chunk into a ChunkResult.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

RGB = tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class ChunkResult:
    """The character chosen for one chunk and the chunk's color.

    Attributes:
        char: Winning character
        color: Average RGB of the chunk, or None when color is not known
    """

    char: str
    color: RGB | None = None

    def without_color(self) -> "ChunkResult":
        """Copy of this result with the color dropped."""
        return ChunkResult(char=self.char)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for the interchange format.

        Returns:
            Dictionary with a char field and, when known, a color field
        """
        data: dict[str, Any] = {"char": self.char}
        if self.color is not None:
            data["color"] = list(self.color)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChunkResult":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with a char field and optional color field

        Returns:
            ChunkResult instance
        """
        color = data.get("color")
        return cls(
            char=data["char"],
            color=(int(color[0]), int(color[1]), int(color[2])) if color is not None else None,
        )


@dataclass(frozen=True, eq=False)
class PixelChunk:
    """One glyph-sized block of pixels sampled from a frame.

    Attributes:
        index: Row-major position of the chunk within its frame
        row: Grid row of the chunk
        column: Grid column of the chunk
        luminance: Float array (height, width), 0-255, brightness offset applied
        color: uint8 array (height, width, 3) of the untouched source colors
        gradient: Normalized gradient magnitude (height, width), or None when
            edge detection is disabled
    """

    index: int
    row: int
    column: int
    luminance: np.ndarray
    color: np.ndarray
    gradient: np.ndarray | None = None

    @property
    def darkness(self) -> np.ndarray:
        """Flattened ink vector: 0.0 for white pixels, 1.0 for black pixels."""
        return 1.0 - self.luminance.ravel() / 255.0

    @property
    def edges(self) -> np.ndarray | None:
        """Flattened gradient magnitude vector, if available."""
        if self.gradient is None:
            return None
        return self.gradient.ravel()

    @property
    def mean_color(self) -> RGB:
        """Average RGB of the chunk, rounded to integers."""
        mean = self.color.reshape(-1, 3).mean(axis=0)
        return (int(round(mean[0])), int(round(mean[1])), int(round(mean[2])))


@dataclass(frozen=True, eq=False)
class PreparedFrame:
    """A resized frame cut into chunks, ready for matching.

    Attributes:
        rows: Number of character rows
        columns: Number of character columns
        pixel_size: (width, height) of the resized frame in pixels
        chunks: Chunks in row-major order
    """

    rows: int
    columns: int
    pixel_size: tuple[int, int]
    chunks: tuple[PixelChunk, ...]

    def __post_init__(self) -> None:
        if len(self.chunks) != self.rows * self.columns:
            raise ValueError(
                f"Expected {self.rows * self.columns} chunks for a "
                f"{self.columns}x{self.rows} grid, got {len(self.chunks)}"
            )

    def __len__(self) -> int:
        return len(self.chunks)
