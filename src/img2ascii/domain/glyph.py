"""Glyph bitmaps and monospace bitmap fonts.

This module defines the font domain model: a Glyph is the binary bitmap of a
single character, and a Font maps characters to glyphs that all share one cell
size.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from img2ascii.exceptions import InconsistentGlyphSizeError, MissingGlyphError


@dataclass(frozen=True, eq=False)
class Glyph:
    """A single character's binary bitmap.

    The bitmap is stored read-only with True marking ink pixels. Rows run top
    to bottom, columns left to right.

    Attributes:
        char: The character this glyph draws
        bitmap: Boolean array of shape (height, width)
    """

    char: str
    bitmap: np.ndarray

    def __post_init__(self) -> None:
        bitmap = np.array(self.bitmap, dtype=bool)
        if bitmap.ndim != 2 or bitmap.size == 0:
            raise ValueError(
                f"Glyph {self.char!r} bitmap must be a non-empty 2D array, got shape {bitmap.shape}"
            )
        bitmap.setflags(write=False)
        object.__setattr__(self, "bitmap", bitmap)

    @property
    def width(self) -> int:
        """Bitmap width in pixels."""
        return int(self.bitmap.shape[1])

    @property
    def height(self) -> int:
        """Bitmap height in pixels."""
        return int(self.bitmap.shape[0])

    @property
    def ink_count(self) -> int:
        """Number of ink pixels."""
        return int(self.bitmap.sum())

    @property
    def coverage(self) -> float:
        """Fraction of the cell covered by ink (0 = blank, 1 = solid)."""
        return float(self.bitmap.mean())

    @property
    def intensity(self) -> np.ndarray:
        """Bitmap flattened to a float vector of 0.0 and 1.0 values."""
        return self.bitmap.astype(np.float64).ravel()

    @classmethod
    def from_rows(cls, char: str, rows: list[str], ink: str = "#") -> "Glyph":
        """Build a glyph from rows of text, e.g. ["#.#", ".#."].

        Args:
            char: Character the glyph draws
            rows: Equal-length strings, one per pixel row
            ink: Character marking an ink pixel

        Returns:
            Glyph instance
        """
        return cls(char=char, bitmap=np.array([[c == ink for c in row] for row in rows]))

    def to_rows(self, ink: str = "#", blank: str = ".") -> list[str]:
        """Render the bitmap as rows of text."""
        return ["".join(ink if px else blank for px in row) for row in self.bitmap]


@dataclass(frozen=True, eq=False)
class Font:
    """A monospace bitmap font.

    Every glyph shares the same width and height. The font is immutable and
    safe to share between threads.

    Attributes:
        glyphs: Mapping of character to glyph
        name: Font name (e.g. from the BDF FONT record)
    """

    glyphs: Mapping[str, Glyph]
    name: str = "font"
    _cell: tuple[int, int] = field(default=(0, 0), init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.glyphs:
            raise ValueError("Font must contain at least one glyph")

        first = next(iter(self.glyphs.values()))
        cell = (first.width, first.height)
        for char, glyph in self.glyphs.items():
            if glyph.char != char:
                raise ValueError(f"Glyph for {char!r} is labelled {glyph.char!r}")
            if (glyph.width, glyph.height) != cell:
                raise InconsistentGlyphSizeError(char, cell, (glyph.width, glyph.height))

        object.__setattr__(self, "glyphs", MappingProxyType(dict(self.glyphs)))
        object.__setattr__(self, "_cell", cell)

    @classmethod
    def from_bitmaps(cls, bitmaps: Mapping[str, np.ndarray], name: str = "font") -> "Font":
        """Build a font from a mapping of character to bitmap array."""
        return cls(
            glyphs={char: Glyph(char=char, bitmap=bitmap) for char, bitmap in bitmaps.items()},
            name=name,
        )

    @property
    def glyph_width(self) -> int:
        """Cell width in pixels."""
        return self._cell[0]

    @property
    def glyph_height(self) -> int:
        """Cell height in pixels."""
        return self._cell[1]

    @property
    def chars(self) -> str:
        """All characters in the font, in load order."""
        return "".join(self.glyphs)

    def __getitem__(self, char: str) -> Glyph:
        try:
            return self.glyphs[char]
        except KeyError:
            raise MissingGlyphError(char) from None

    def __contains__(self, char: object) -> bool:
        return char in self.glyphs

    def __iter__(self) -> Iterator[str]:
        return iter(self.glyphs)

    def __len__(self) -> int:
        return len(self.glyphs)
