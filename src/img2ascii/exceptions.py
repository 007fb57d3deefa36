"""Exception hierarchy for img2ascii."""


class Img2AsciiError(Exception):
    """Base exception for all img2ascii errors."""

    pass


class ConfigurationError(Img2AsciiError):
    """Errors in run configuration detected before any conversion work."""

    pass


class InvalidMetricNameError(ConfigurationError):
    """Unrecognized metric identifier."""

    def __init__(self, name: str, valid: list[str] | None = None) -> None:
        self.name = name
        self.valid = valid or []
        message = f"Unknown metric '{name}'"
        if self.valid:
            message += f" (expected one of: {', '.join(self.valid)})"
        super().__init__(message)


class AlphabetError(ConfigurationError):
    """Errors related to alphabet construction."""

    pass


class DuplicateCharacterError(AlphabetError):
    """Alphabet contains the same character more than once."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Duplicate character {char!r} in alphabet")


class EmptyAlphabetError(AlphabetError):
    """Alphabet has no characters."""

    def __init__(self) -> None:
        super().__init__("Alphabet must contain at least one character")


class UnknownAlphabetError(AlphabetError):
    """Alphabet is neither a built-in name nor a readable file."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Alphabet '{name}' is not a built-in alphabet or an existing file")


class FontError(Img2AsciiError):
    """Errors related to font loading or glyph lookup."""

    pass


class FontLoadError(FontError):
    """Error loading a bitmap font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class MissingGlyphError(FontError):
    """Alphabet character has no glyph in the font."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Character {char!r} not found in font")


class InconsistentGlyphSizeError(FontError):
    """Glyph bitmap does not match the font's cell size."""

    def __init__(self, char: str, expected: tuple[int, int], actual: tuple[int, int]) -> None:
        self.char = char
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Glyph {char!r} is {actual[0]}x{actual[1]}, font cell is {expected[0]}x{expected[1]}"
        )


class DimensionError(Img2AsciiError):
    """Errors in image or grid dimensions."""

    pass


class UnderflowDimensionsError(DimensionError):
    """Target width or source image is smaller than one glyph cell."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InconsistentFrameDimensionsError(DimensionError):
    """Animation frames resize to different pixel dimensions."""

    def __init__(
        self,
        frame_index: int,
        expected: tuple[int, int],
        actual: tuple[int, int],
    ) -> None:
        self.frame_index = frame_index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Frame {frame_index} resizes to {actual[0]}x{actual[1]} pixels, "
            f"expected {expected[0]}x{expected[1]}"
        )


class ImageLoadError(Img2AsciiError):
    """Error loading or decoding a source image."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load image '{source}': {reason}")


class OutputError(Img2AsciiError):
    """Error writing converted output."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write output '{path}': {reason}")


class ChunkProcessingError(Img2AsciiError):
    """A worker failed while matching chunks; the run is aborted."""

    def __init__(self, frame_index: int, reason: str) -> None:
        self.frame_index = frame_index
        self.reason = reason
        super().__init__(f"Chunk matching failed in frame {frame_index}: {reason}")
