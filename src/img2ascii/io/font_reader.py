"""Font reader for BDF bitmap fonts.

This module provides the BdfFontReader class, which loads Glyph Bitmap
Distribution Format files with Pillow's BdfFontFile parser and turns them into
the Font domain model. Pillow yields one bitmap and bounding box per encoding;
the reader pastes each bitmap into a cell shared by the whole font, aligned on
the baseline, so every glyph has the same size.

Built-in fonts ship as package data and are selected by name; anything else is
treated as a path to a BDF file.
"""

from collections.abc import Iterable, Iterator
from importlib import resources
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import BdfFontFile, Image

from img2ascii.domain.glyph import Font, Glyph
from img2ascii.exceptions import FontLoadError, MissingGlyphError

FONT_PACKAGE = "img2ascii.fonts"

BUILTIN_FONTS: dict[str, str] = {
    "fixed-6x8": "fixed-6x8.bdf",
}

# (left, top, right, bottom) relative to the origin on the baseline, y down
_Box = tuple[int, int, int, int]


class BdfFontReader:
    """Loads BDF fonts and extracts glyph bitmaps.

    Only encodings 0-255 are read, which covers ASCII and Latin-1.

    Example:
        reader = BdfFontReader(Path("courier.bdf"))
        reader.load()
        font = reader.to_font(chars="abc")
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the BDF file
        """
        self._font_path = font_path
        self._glyphs: dict[str, tuple[_Box, Image.Image]] | None = None
        self._cell: tuple[int, int] = (0, 0)
        self._ascent = 0

    @classmethod
    def builtin(cls, name: str) -> "BdfFontReader":
        """Create a reader for a built-in font, already loaded.

        Raises:
            KeyError: If no built-in font has that name
        """
        filename = BUILTIN_FONTS[name]
        reader = cls(Path(filename))
        reader.load_bytes(resources.files(FONT_PACKAGE).joinpath(filename).read_bytes())
        return reader

    def load(self) -> None:
        """Read and parse the font file.

        Raises:
            FileNotFoundError: If the font file does not exist
            SyntaxError: If the file does not start with a BDF header
            FontLoadError: If the font has no usable glyphs
        """
        if not self._font_path.exists():
            raise FileNotFoundError(f"Font file not found: {self._font_path}")

        with self._font_path.open("rb") as fp:
            self._read(fp)

    def load_bytes(self, data: bytes) -> None:
        """Parse BDF source held in memory."""
        self._read(BytesIO(data))

    def _read(self, fp: BinaryIO) -> None:
        bdf = BdfFontFile.BdfFontFile(fp)

        glyphs: dict[str, tuple[_Box, Image.Image]] = {}
        advance = 0
        for code, entry in enumerate(bdf.glyph):
            if entry is None:
                continue
            (dwx, _dwy), box, _src, image = entry
            glyphs[chr(code)] = (box, image)
            advance = max(advance, dwx, box[2])

        if not glyphs:
            raise FontLoadError(str(self._font_path), "font has no encoded glyphs")

        ascent = max(-box[1] for box, _ in glyphs.values())
        descent = max(box[3] for box, _ in glyphs.values())
        if advance < 1 or ascent + descent < 1:
            raise FontLoadError(
                str(self._font_path), f"invalid cell {advance}x{ascent + descent}"
            )

        self._glyphs = glyphs
        self._cell = (advance, ascent + descent)
        self._ascent = ascent

    def _require_loaded(self) -> dict[str, tuple[_Box, Image.Image]]:
        if self._glyphs is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._glyphs

    @property
    def name(self) -> str:
        """Font name, taken from the file name."""
        self._require_loaded()
        return self._font_path.stem

    @property
    def cell_size(self) -> tuple[int, int]:
        """(width, height) of the glyph cell in pixels."""
        self._require_loaded()
        return self._cell

    @property
    def glyph_count(self) -> int:
        """Number of encoded glyphs in the font."""
        return len(self._require_loaded())

    def get_glyph(self, char: str) -> Glyph | None:
        """Get the glyph for a character, placed in the font cell.

        Args:
            char: Character to look up

        Returns:
            Glyph, or None if the font has no glyph for the character
        """
        entry = self._require_loaded().get(char)
        if entry is None:
            return None

        box, image = entry
        cell = Image.new("1", self._cell, 0)
        if image.width and image.height:
            # Pixels outside the cell are clipped by paste
            cell.paste(image, (box[0], self._ascent + box[1]))
        return Glyph(char=char, bitmap=np.asarray(cell, dtype=bool))

    def iter_glyphs(self) -> Iterator[Glyph]:
        """Iterate over all encoded glyphs in encoding order."""
        for char in self._require_loaded():
            glyph = self.get_glyph(char)
            if glyph is not None:
                yield glyph

    def to_font(self, chars: Iterable[str] | None = None) -> Font:
        """Build a Font from the loaded glyphs.

        Args:
            chars: Only include these characters (all glyphs if None).
                Characters the font lacks are skipped; the glyph set build
                reports them.

        Returns:
            Font instance
        """
        loaded = self._require_loaded()
        wanted = loaded.keys() if chars is None else dict.fromkeys(chars)

        glyphs: dict[str, Glyph] = {}
        for char in wanted:
            glyph = self.get_glyph(char)
            if glyph is not None:
                glyphs[char] = glyph

        if not glyphs:
            if wanted:
                raise MissingGlyphError(next(iter(wanted)))
            raise FontLoadError(str(self._font_path), "no characters requested")
        return Font(glyphs=glyphs, name=self.name)

    def __enter__(self) -> "BdfFontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self._glyphs = None


def load_font(source: str | Path, chars: Iterable[str] | None = None) -> Font:
    """Load a built-in font by name, or a BDF file by path."""
    if isinstance(source, str) and source in BUILTIN_FONTS:
        return BdfFontReader.builtin(source).to_font(chars)
    with BdfFontReader(Path(source)) as reader:
        return reader.to_font(chars)
