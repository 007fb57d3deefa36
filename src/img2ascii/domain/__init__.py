"""Domain models for img2ascii.

This module contains the core domain models representing fonts, glyphs,
alphabets, pixel chunks and rendered frames. All models are designed to be:

- Immutable (frozen dataclasses, read-only numpy arrays)
- Safe to share between worker threads without locking
- Independent of image codec and font file details

Key classes:
- Alphabet: Ordered set of candidate characters
- Glyph: A single character bitmap
- Font: Monospace mapping of character to glyph
- PixelChunk: Glyph-sized block of source pixels
- ChunkResult: Chosen character and color for one chunk
- PreparedFrame: A frame cut into chunks
- AsciiFrame: Rendered character grid
- AnimationSequence: Ordered frames plus frame rate
"""

from img2ascii.domain.alphabet import BUILTIN_ALPHABETS, Alphabet
from img2ascii.domain.chunk import RGB, ChunkResult, PixelChunk, PreparedFrame
from img2ascii.domain.frame import AnimationSequence, AsciiFrame
from img2ascii.domain.glyph import Font, Glyph

__all__: list[str] = [
    "BUILTIN_ALPHABETS",
    "RGB",
    # Font types
    "Alphabet",
    "Font",
    "Glyph",
    # Chunk types
    "ChunkResult",
    "PixelChunk",
    "PreparedFrame",
    # Frame types
    "AnimationSequence",
    "AsciiFrame",
]
