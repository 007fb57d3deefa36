"""Output writers for rendered frames.

This module formats AsciiFrames as plain text, 24-bit ANSI terminal text,
HTML, or bitmaps drawn with the font's own glyphs, and writes sequences to
disk in the format implied by the output path.

Bitmaps use the same convention as matching: glyph ink is dark on a white
ground, so a dense glyph reproduces a dark region of the source.
"""

import html
from pathlib import Path

import numpy as np
from PIL import Image

from img2ascii.config import OutputFormat
from img2ascii.domain import AnimationSequence, AsciiFrame, Font
from img2ascii.exceptions import OutputError
from img2ascii.io.interchange import write_sequence_json

ANSI_RESET = "\x1b[0m"
INK_RGB = (0, 0, 0)
PAPER_RGB = (255, 255, 255)


def frame_to_text(frame: AsciiFrame) -> str:
    """Render a frame as plain text."""
    return frame.to_text()


def frame_to_ansi(frame: AsciiFrame, color: bool = True) -> str:
    """Render a frame as text with 24-bit ANSI foreground colors.

    Cells without a color, or every cell when color is False, are emitted as
    plain characters.
    """
    if not color:
        return frame.to_text()

    lines: list[str] = []
    for row in frame.cells:
        parts: list[str] = []
        for cell in row:
            if cell.color is None:
                parts.append(cell.char)
            else:
                r, g, b = cell.color
                parts.append(f"\x1b[38;2;{r};{g};{b}m{cell.char}")
        lines.append("".join(parts) + ANSI_RESET)
    return "\n".join(lines)


def frame_to_html(frame: AsciiFrame, color: bool = True) -> str:
    """Render a frame as HTML lines of colored spans joined by <br>."""
    lines: list[str] = []
    for row in frame.cells:
        parts: list[str] = []
        for cell in row:
            char = html.escape(cell.char)
            if color and cell.color is not None:
                r, g, b = cell.color
                parts.append(f'<span style="color: rgb({r}, {g}, {b})">{char}</span>')
            else:
                parts.append(char)
        lines.append("".join(parts))
    return "<br>\n".join(lines)


def frame_to_image(frame: AsciiFrame, font: Font, color: bool = True) -> Image.Image:
    """Draw a frame with the font's glyph bitmaps.

    Args:
        frame: Rendered frame
        font: Font supplying the glyph bitmaps
        color: Ink each glyph with its cell color instead of black

    Returns:
        RGB image of size (columns * glyph_width, rows * glyph_height)

    Raises:
        MissingGlyphError: If the frame uses a character the font lacks
    """
    gw, gh = font.glyph_width, font.glyph_height
    canvas = np.empty((frame.rows * gh, frame.columns * gw, 3), dtype=np.uint8)
    canvas[:] = PAPER_RGB

    for row_idx, row in enumerate(frame.cells):
        for col_idx, cell in enumerate(row):
            bitmap = font[cell.char].bitmap
            ink = cell.color if color and cell.color is not None else INK_RGB
            block = canvas[row_idx * gh : (row_idx + 1) * gh, col_idx * gw : (col_idx + 1) * gw]
            block[bitmap] = ink

    return Image.fromarray(canvas)


class SequenceWriter:
    """Writes rendered sequences in the format chosen by the output path.

    Example:
        writer = SequenceWriter(sequence, font, color=True)
        writer.write(Path("out.gif"))
    """

    def __init__(self, sequence: AnimationSequence, font: Font, color: bool = True) -> None:
        """Initialize the writer.

        Args:
            sequence: Rendered frames
            font: Font used for bitmap output
            color: Emit cell colors
        """
        self._sequence = sequence
        self._font = font
        self._color = color

    def write(self, path: Path, output_format: OutputFormat | None = None) -> OutputFormat:
        """Write the sequence to a file.

        Text, HTML and still-image formats contain the first frame only.

        Args:
            path: Output path
            output_format: Format to write (inferred from the path if None)

        Returns:
            The format that was written

        Raises:
            OutputError: If the file cannot be written
            ValueError: If the format is not a file format
        """
        if output_format is None:
            output_format = OutputFormat.from_path(path)

        if not self._sequence.frames:
            raise OutputError(str(path), "sequence has no frames")
        first = self._sequence.frames[0]

        try:
            if output_format is OutputFormat.JSON:
                write_sequence_json(self._sequence, path, color=self._color)
            elif output_format is OutputFormat.TEXT:
                path.write_text(frame_to_text(first) + "\n", encoding="utf-8")
            elif output_format is OutputFormat.HTML:
                path.write_text(frame_to_html(first, color=self._color), encoding="utf-8")
            elif output_format is OutputFormat.GIF:
                self._write_gif(path)
            elif output_format is OutputFormat.IMAGE:
                frame_to_image(first, self._font, color=self._color).save(path)
            else:
                raise ValueError(f"Cannot write {output_format.value} output to a file")
        except OSError as e:
            raise OutputError(str(path), str(e)) from e

        return output_format

    def _write_gif(self, path: Path) -> None:
        images = [
            frame_to_image(frame, self._font, color=self._color)
            for frame in self._sequence.frames
        ]
        duration_ms = max(1, int(round(1000.0 / self._sequence.fps)))
        images[0].save(
            path,
            format="GIF",
            save_all=True,
            append_images=images[1:],
            duration=duration_ms,
            loop=0,
        )
