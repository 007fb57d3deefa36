"""img2ascii - Render images as characters from a monospace bitmap font.

img2ascii converts a raster image, or every frame of an animated GIF, into a
grid of characters. Each character is chosen so that its glyph bitmap best
approximates the block of source pixels it replaces, under one of several
similarity metrics.

Example:
    $ img2ascii photo.png --width 120

This prints the picture as colored text. Use --output to write JSON, text,
HTML, a rendered PNG or an animated GIF instead.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
