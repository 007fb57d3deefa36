"""Image, font and output I/O for img2ascii.

This module is the boundary between the matching core and the outside world.
It provides a clean abstraction layer between Pillow, requests and BDF font
files and the domain models.

Key responsibilities:
- Load BDF bitmap fonts into Font models
- Load still and animated images from paths or URLs
- Format rendered frames as text, ANSI, HTML or bitmaps
- Read and write the JSON interchange format

Key classes:
- BdfFontReader: Parse BDF fonts
- ImageReader: Decode image frames
- SequenceWriter: Write rendered sequences
"""

from img2ascii.io.font_reader import BUILTIN_FONTS, BdfFontReader, load_font
from img2ascii.io.image_reader import ImageReader, SourceImage, is_url, load_image
from img2ascii.io.interchange import (
    dumps_sequence,
    loads_sequence,
    read_sequence_json,
    write_sequence_json,
)
from img2ascii.io.writer import (
    SequenceWriter,
    frame_to_ansi,
    frame_to_html,
    frame_to_image,
    frame_to_text,
)

__all__ = [
    "BUILTIN_FONTS",
    "BdfFontReader",
    "ImageReader",
    "SequenceWriter",
    "SourceImage",
    "dumps_sequence",
    "frame_to_ansi",
    "frame_to_html",
    "frame_to_image",
    "frame_to_text",
    "is_url",
    "load_font",
    "load_image",
    "loads_sequence",
    "read_sequence_json",
    "write_sequence_json",
]
