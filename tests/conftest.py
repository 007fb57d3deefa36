"""Shared fixtures: a small 3x3 bitmap font and images drawn with it."""

from pathlib import Path

import numpy as np
import pytest

from img2ascii.domain import Alphabet, Font, Glyph

GLYPH_ROWS: dict[str, list[str]] = {
    " ": ["...", "...", "..."],
    ".": ["...", ".#.", "..."],
    "-": ["...", "###", "..."],
    "|": [".#.", ".#.", ".#."],
    "/": ["..#", ".#.", "#.."],
    "#": ["###", "###", "###"],
}


def _bdf_source() -> str:
    lines = [
        "STARTFONT 2.1",
        "FONT -test-fixed-medium-r-normal--3-30-75-75-c-30-iso10646-1",
        "SIZE 3 75 75",
        "FONTBOUNDINGBOX 3 3 0 0",
        "STARTPROPERTIES 2",
        "FONT_ASCENT 3",
        "FONT_DESCENT 0",
        "ENDPROPERTIES",
        f"CHARS {len(GLYPH_ROWS)}",
    ]
    for char, rows in GLYPH_ROWS.items():
        lines += [
            f"STARTCHAR U+{ord(char):04X}",
            f"ENCODING {ord(char)}",
            "SWIDTH 1000 0",
            "DWIDTH 3 0",
            "BBX 3 3 0 0",
            "BITMAP",
        ]
        for row in rows:
            value = sum(1 << (7 - i) for i, px in enumerate(row) if px == "#")
            lines.append(f"{value:02X}")
        lines.append("ENDCHAR")
    lines.append("ENDFONT")
    return "\n".join(lines) + "\n"


@pytest.fixture
def font() -> Font:
    """Six distinct 3x3 glyphs."""
    return Font(
        glyphs={char: Glyph.from_rows(char, rows) for char, rows in GLYPH_ROWS.items()},
        name="test-3x3",
    )


@pytest.fixture
def alphabet() -> Alphabet:
    return Alphabet.from_string("".join(GLYPH_ROWS))


@pytest.fixture
def bdf_text() -> str:
    """BDF source of the same six glyphs."""
    return _bdf_source()


@pytest.fixture
def bdf_path(tmp_path: Path, bdf_text: str) -> Path:
    path = tmp_path / "test-3x3.bdf"
    path.write_text(bdf_text, encoding="latin-1")
    return path


@pytest.fixture
def draw(font: Font):
    """Draw lines of text with the test font, black ink on white, as an RGB array."""

    def _draw(lines: list[str]) -> np.ndarray:
        gw, gh = font.glyph_width, font.glyph_height
        canvas = np.full((len(lines) * gh, len(lines[0]) * gw, 3), 255, dtype=np.uint8)
        for row, line in enumerate(lines):
            for col, char in enumerate(line):
                block = canvas[row * gh : (row + 1) * gh, col * gw : (col + 1) * gw]
                block[font[char].bitmap] = 0
        return canvas

    return _draw
