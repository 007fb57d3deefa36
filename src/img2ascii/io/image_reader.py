"""Image reader for still and animated sources.

This module loads images from local paths or http(s) URLs with Pillow and
returns their frames as RGB images. Multi-frame formats (GIF, APNG, WebP)
yield every frame together with its display duration.
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

import requests
from PIL import Image, ImageSequence

from img2ascii.exceptions import ImageLoadError

DEFAULT_TIMEOUT_S = 30.0


@dataclass
class SourceImage:
    """Decoded frames of a source image.

    Attributes:
        source: Path or URL the image came from
        frames: RGB frames in playback order
        durations_ms: Display duration of each frame (0 when unknown)
    """

    source: str
    frames: list[Image.Image]
    durations_ms: list[int] = field(default_factory=list)

    @property
    def is_animated(self) -> bool:
        """Whether the source has more than one frame."""
        return len(self.frames) > 1

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the first frame."""
        return self.frames[0].size

    @property
    def fps(self) -> float | None:
        """Frame rate implied by the frame durations, if known."""
        known = [d for d in self.durations_ms if d > 0]
        if not known:
            return None
        return 1000.0 / (sum(known) / len(known))


def is_url(source: str) -> bool:
    """Whether a source string is an http(s) URL."""
    return source.startswith(("http://", "https://"))


class ImageReader:
    """Loads images from paths or URLs.

    Example:
        image = ImageReader("https://example.com/cat.gif").load()
        for frame in image.frames:
            ...
    """

    def __init__(self, source: str | Path, timeout: float = DEFAULT_TIMEOUT_S) -> None:
        """Initialize the image reader.

        Args:
            source: Local path or http(s) URL
            timeout: HTTP timeout in seconds
        """
        self._source = str(source)
        self._timeout = timeout

    def load(self) -> SourceImage:
        """Load and decode every frame of the image.

        Returns:
            SourceImage with RGB frames

        Raises:
            FileNotFoundError: If a local image does not exist
            requests.RequestException: If a URL cannot be fetched
            PIL.UnidentifiedImageError: If the data is not a known image format
            ImageLoadError: If the image decodes to no frames
        """
        if is_url(self._source):
            stream = BytesIO(self._download())
        else:
            path = Path(self._source)
            if not path.is_file():
                raise FileNotFoundError(f"Image file not found: {self._source}")
            stream = BytesIO(path.read_bytes())

        with Image.open(stream) as image:
            frames: list[Image.Image] = []
            durations: list[int] = []
            for frame in ImageSequence.Iterator(image):
                frames.append(frame.convert("RGB"))
                durations.append(int(frame.info.get("duration", 0) or 0))

        if not frames:
            raise ImageLoadError(self._source, "image has no frames")

        return SourceImage(source=self._source, frames=frames, durations_ms=durations)

    def _download(self) -> bytes:
        response = requests.get(self._source, timeout=self._timeout)
        response.raise_for_status()
        return response.content


def load_image(source: str | Path) -> SourceImage:
    """Load an image from a path or URL."""
    return ImageReader(source).load()
