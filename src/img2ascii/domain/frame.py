"""Rendered character grids and animation sequences."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from img2ascii.domain.chunk import RGB, ChunkResult


@dataclass(frozen=True)
class AsciiFrame:
    """A rendered grid of characters for one image or animation frame.

    Cells are stored row-major: rows top to bottom, columns left to right.

    Attributes:
        cells: Tuple of rows, each a tuple of ChunkResult
    """

    cells: tuple[tuple[ChunkResult, ...], ...]

    def __post_init__(self) -> None:
        if not self.cells or not self.cells[0]:
            raise ValueError("Frame must have at least one row and one column")
        width = len(self.cells[0])
        for row_idx, row in enumerate(self.cells):
            if len(row) != width:
                raise ValueError(
                    f"Row {row_idx} has {len(row)} cells, expected {width}"
                )

    @classmethod
    def from_results(cls, results: Sequence[ChunkResult], columns: int) -> "AsciiFrame":
        """Fold a row-major list of results into a grid.

        Args:
            results: One result per chunk, in chunk order
            columns: Number of cells per row

        Returns:
            AsciiFrame instance
        """
        if columns < 1 or len(results) % columns != 0:
            raise ValueError(f"{len(results)} results do not fill rows of {columns} cells")
        return cls(
            cells=tuple(
                tuple(results[start : start + columns])
                for start in range(0, len(results), columns)
            )
        )

    @property
    def rows(self) -> int:
        """Number of character rows."""
        return len(self.cells)

    @property
    def columns(self) -> int:
        """Number of character columns."""
        return len(self.cells[0])

    def lines(self) -> list[str]:
        """Characters of each row joined into strings."""
        return ["".join(cell.char for cell in row) for row in self.cells]

    def to_text(self) -> str:
        """The grid as newline-separated text."""
        return "\n".join(self.lines())

    def colors(self) -> list[list[RGB | None]]:
        """The cell colors as a grid."""
        return [[cell.color for cell in row] for row in self.cells]

    def without_color(self) -> "AsciiFrame":
        """Copy of this frame with every cell color dropped."""
        return AsciiFrame(
            cells=tuple(tuple(cell.without_color() for cell in row) for row in self.cells)
        )

    def to_dict(self) -> list[list[dict[str, Any]]]:
        """Serialize to nested lists of cell dictionaries."""
        return [[cell.to_dict() for cell in row] for row in self.cells]

    @classmethod
    def from_dict(cls, data: list[list[dict[str, Any]]]) -> "AsciiFrame":
        """Deserialize from nested lists of cell dictionaries."""
        return cls(cells=tuple(tuple(ChunkResult.from_dict(c) for c in row) for row in data))


@dataclass(frozen=True)
class AnimationSequence:
    """Ordered rendered frames with shared metadata.

    Attributes:
        frames: Frames in playback order
        fps: Playback frame rate
        columns: Grid width shared by every frame
        rows: Grid height shared by every frame
    """

    frames: tuple[AsciiFrame, ...]
    fps: float
    columns: int
    rows: int

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        for idx, frame in enumerate(self.frames):
            if (frame.columns, frame.rows) != (self.columns, self.rows):
                raise ValueError(
                    f"Frame {idx} is {frame.columns}x{frame.rows}, "
                    f"sequence is {self.columns}x{self.rows}"
                )

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def frame_duration(self) -> float:
        """Seconds each frame stays on screen."""
        return 1.0 / self.fps

    def without_color(self) -> "AnimationSequence":
        """Copy of this sequence with every cell color dropped."""
        return AnimationSequence(
            frames=tuple(frame.without_color() for frame in self.frames),
            fps=self.fps,
            columns=self.columns,
            rows=self.rows,
        )

    def to_dict(self, color: bool = True) -> dict[str, Any]:
        """Serialize to the JSON interchange structure.

        Args:
            color: Include cell colors

        Returns:
            Dictionary with fps, grid dimensions and frames
        """
        sequence = self if color else self.without_color()
        return {
            "fps": self.fps,
            "columns": self.columns,
            "rows": self.rows,
            "color": color,
            "frames": [frame.to_dict() for frame in sequence.frames],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnimationSequence":
        """Deserialize from the JSON interchange structure."""
        return cls(
            frames=tuple(AsciiFrame.from_dict(f) for f in data["frames"]),
            fps=float(data["fps"]),
            columns=int(data["columns"]),
            rows=int(data["rows"]),
        )
