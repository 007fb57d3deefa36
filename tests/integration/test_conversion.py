"""End-to-end conversion tests: BDF font and image files in, frames out."""

from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from img2ascii.config import (
    ConversionConfig,
    Img2AsciiSettings,
    LoggingConfig,
    Metric,
    OutputConfig,
)
from img2ascii.core import ImageConverter
from img2ascii.exceptions import (
    InconsistentFrameDimensionsError,
    MissingGlyphError,
    UnknownAlphabetError,
)
from img2ascii.io import read_sequence_json

LINES = ["#-/ ", "|.#-"]


@pytest.fixture
def alphabet_file(tmp_path: Path) -> Path:
    path = tmp_path / "alphabet.txt"
    path.write_text(" .-|/#\n", encoding="utf-8")
    return path


@pytest.fixture
def still_path(tmp_path: Path, draw) -> Path:
    path = tmp_path / "still.png"
    Image.fromarray(draw(LINES)).save(path)
    return path


@pytest.fixture
def gif_path(tmp_path: Path, draw) -> Path:
    path = tmp_path / "anim.gif"
    frames = [Image.fromarray(draw(lines)).convert("L") for lines in (["#.", "/|"], ["-#", " /"])]
    frames[0].save(path, save_all=True, append_images=frames[1:], duration=125, loop=0)
    return path


def make_settings(
    font_path: Path,
    alphabet: Path | str,
    width: int,
    metric: Metric = Metric.DOT,
    output: Path | None = None,
    **conversion,
) -> Img2AsciiSettings:
    return Img2AsciiSettings(
        conversion=ConversionConfig(
            font=font_path,
            alphabet=str(alphabet),
            width=width,
            metric=metric,
            **conversion,
        ),
        output=OutputConfig(path=output),
        logging=LoggingConfig(log_level="ERROR"),
    )


class TestImageConverter:
    """Tests for ImageConverter end to end."""

    def test_convert_still(self, bdf_path: Path, alphabet_file: Path, still_path: Path) -> None:
        """Test a still image drawn with the font converts back to its text."""
        converter = ImageConverter(make_settings(bdf_path, alphabet_file, width=4), quiet=True)
        result = converter.convert(still_path)

        assert not result.animated
        assert result.output_path is None
        assert len(result.sequence) == 1
        assert result.sequence.frames[0].lines() == LINES
        assert result.sequence.fps == 30.0
        assert result.font.chars == " .-|/#"
        assert result.stats.frame_count == 1
        assert result.stats.chunk_count == 8

    @pytest.mark.parametrize("threads", [1, 2, 8])
    def test_threads_do_not_change_output(
        self, bdf_path: Path, alphabet_file: Path, still_path: Path, threads: int
    ) -> None:
        converter = ImageConverter(
            make_settings(bdf_path, alphabet_file, width=4, threads=threads), quiet=True
        )
        assert converter.convert(still_path).sequence.frames[0].lines() == LINES

    def test_convert_gif(self, bdf_path: Path, alphabet_file: Path, gif_path: Path) -> None:
        """Test every animation frame is rendered at the source frame rate."""
        converter = ImageConverter(make_settings(bdf_path, alphabet_file, width=2), quiet=True)
        result = converter.convert(str(gif_path))

        assert result.animated
        assert [f.lines() for f in result.sequence.frames] == [["#.", "/|"], ["-#", " /"]]
        assert result.sequence.fps == pytest.approx(8.0)
        assert result.stats.frame_count == 2

    def test_fps_override(self, bdf_path: Path, alphabet_file: Path, gif_path: Path) -> None:
        settings = make_settings(bdf_path, alphabet_file, width=2)
        settings.output.fps = 24.0
        result = ImageConverter(settings, quiet=True).convert(gif_path)
        assert result.sequence.fps == 24.0

    def test_write_json(
        self, bdf_path: Path, alphabet_file: Path, still_path: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "out.json"
        converter = ImageConverter(
            make_settings(bdf_path, alphabet_file, width=4, output=output), quiet=True
        )
        result = converter.convert(still_path)

        assert result.output_path == output
        written = read_sequence_json(output)
        assert written == result.sequence

    def test_write_gif(
        self, bdf_path: Path, alphabet_file: Path, gif_path: Path, tmp_path: Path
    ) -> None:
        """Test an animation written as GIF draws glyphs back into frames."""
        output = tmp_path / "out.gif"
        converter = ImageConverter(
            make_settings(bdf_path, alphabet_file, width=2, output=output), quiet=True
        )
        converter.convert(gif_path)

        with Image.open(output) as image:
            assert image.n_frames == 2
            assert image.size == (6, 6)

    def test_grad_metric_still(self, bdf_path: Path, alphabet_file: Path, tmp_path: Path) -> None:
        """Test the default metric on a uniform image picks a uniform glyph."""
        path = tmp_path / "black.png"
        Image.new("RGB", (30, 30), color=(0, 0, 0)).save(path)
        converter = ImageConverter(
            make_settings(bdf_path, alphabet_file, width=5, metric=Metric.GRAD), quiet=True
        )
        frame = converter.convert(path).sequence.frames[0]
        assert frame.lines() == ["#####"] * 5

    def test_missing_glyph_before_decoding(self, bdf_path: Path, still_path: Path) -> None:
        """Test an alphabet the font cannot cover fails before any image work."""
        converter = ImageConverter(make_settings(bdf_path, "minimal", width=4), quiet=True)
        with patch("img2ascii.core.converter.ImageReader") as reader:
            with pytest.raises(MissingGlyphError) as exc_info:
                converter.convert(still_path)
        assert exc_info.value.char == ":"
        reader.assert_not_called()

    def test_unknown_alphabet(self, bdf_path: Path, still_path: Path) -> None:
        converter = ImageConverter(make_settings(bdf_path, "no-such-alphabet", width=4), quiet=True)
        with pytest.raises(UnknownAlphabetError):
            converter.convert(still_path)

    def test_default_font(self, tmp_path: Path) -> None:
        """Test the built-in font is used when none is configured."""
        path = tmp_path / "wide.png"
        Image.new("RGB", (24, 16)).save(path)
        settings = Img2AsciiSettings(
            conversion=ConversionConfig(alphabet="minimal", width=2, metric=Metric.DOT),
            logging=LoggingConfig(log_level="ERROR"),
        )

        result = ImageConverter(settings, quiet=True).convert(path)

        assert result.font.name == "fixed-6x8"
        assert (result.font.glyph_width, result.font.glyph_height) == (6, 8)
        assert result.sequence.columns == 2

    def test_font_not_found(self, tmp_path: Path, alphabet_file: Path, still_path: Path) -> None:
        converter = ImageConverter(
            make_settings(tmp_path / "missing.bdf", alphabet_file, width=4), quiet=True
        )
        with pytest.raises(FileNotFoundError, match="missing.bdf"):
            converter.convert(still_path)

    def test_image_not_found(self, bdf_path: Path, alphabet_file: Path, tmp_path: Path) -> None:
        converter = ImageConverter(make_settings(bdf_path, alphabet_file, width=4), quiet=True)
        with pytest.raises(FileNotFoundError, match="missing.png"):
            converter.convert(tmp_path / "missing.png")

    def test_inconsistent_frames_write_nothing(
        self, bdf_path: Path, alphabet_file: Path, tmp_path: Path
    ) -> None:
        """Test frames of different grid sizes abort the run without output."""
        frames = [
            Image.fromarray(np.zeros((6, 6), dtype=np.uint8)),
            Image.fromarray(np.full((9, 6), 255, dtype=np.uint8)),
        ]
        output = tmp_path / "out.json"
        converter = ImageConverter(
            make_settings(bdf_path, alphabet_file, width=2, output=output), quiet=True
        )

        with patch("img2ascii.core.converter.ImageReader") as reader:
            reader.return_value.load.return_value.frames = frames
            reader.return_value.load.return_value.fps = None
            with pytest.raises(InconsistentFrameDimensionsError):
                converter.convert("frames.gif")

        assert not output.exists()
        assert converter.conversion_logger.stats.frame_count == 0
