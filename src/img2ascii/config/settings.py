"""Configuration settings for img2ascii."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from img2ascii.exceptions import InvalidMetricNameError

DEFAULT_FONT = "fixed-6x8"


class Metric(str, Enum):
    """Similarity metric used to match chunks against glyphs."""

    GRAD = "grad"
    FAST = "fast"
    DOT = "dot"
    JACCARD = "jaccard"
    OCCLUSION = "occlusion"
    CLEAR = "clear"

    @classmethod
    def parse(cls, name: "str | Metric") -> "Metric":
        """Look up a metric by name.

        Args:
            name: Metric name (case-insensitive) or Metric member

        Returns:
            Matching Metric

        Raises:
            InvalidMetricNameError: If no metric has that name
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise InvalidMetricNameError(str(name), [m.value for m in cls]) from None


class OutputFormat(str, Enum):
    """Kind of output written for a conversion."""

    TERMINAL = "terminal"
    TEXT = "text"
    HTML = "html"
    JSON = "json"
    IMAGE = "image"
    GIF = "gif"

    @classmethod
    def from_path(cls, path: Path | None) -> "OutputFormat":
        """Infer the output format from a file extension.

        Args:
            path: Output path, or None for terminal output

        Returns:
            Matching output format (IMAGE for unrecognized extensions)
        """
        if path is None:
            return cls.TERMINAL

        suffix = path.suffix.lower()
        if suffix == ".json":
            return cls.JSON
        if suffix == ".gif":
            return cls.GIF
        if suffix == ".txt":
            return cls.TEXT
        if suffix in (".html", ".htm"):
            return cls.HTML
        return cls.IMAGE


class ConversionConfig(BaseModel):
    """Configuration for chunk-to-glyph matching."""

    font: str | Path = Field(
        default=DEFAULT_FONT,
        description="Built-in font name or path to a BDF bitmap font",
    )
    alphabet: str = Field(
        default="alphabet",
        description="Built-in alphabet name or path to a file of characters",
    )
    width: int = Field(
        default=100,
        ge=1,
        description="Output width in characters",
    )
    metric: Metric = Field(
        default=Metric.GRAD,
        description="Similarity metric",
    )
    brightness_offset: float = Field(
        default=0.0,
        ge=0.0,
        le=255.0,
        description="Subtracted from luminance before scoring",
    )
    noise_scale: float = Field(
        default=0.0,
        ge=0.0,
        description="Magnitude of random perturbation added to each glyph score",
    )
    noise_seed: int | None = Field(
        default=None,
        ge=0,
        description="Seed for score noise (None = new seed every run)",
    )
    edge_detection: bool = Field(
        default=True,
        description="Compute a gradient map for edge-aware metrics",
    )
    threads: int = Field(
        default=1,
        ge=1,
        le=256,
        description="Worker threads per frame",
    )

    @field_validator("metric", mode="before")
    @classmethod
    def _parse_metric(cls, value: object) -> Metric:
        return Metric.parse(value)  # type: ignore[arg-type]


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    path: Path | None = Field(
        default=None,
        description="Output path (None = print to terminal)",
    )
    color: bool = Field(
        default=True,
        description="Emit cell colors",
    )
    fps: float | None = Field(
        default=None,
        gt=0.0,
        le=240.0,
        description="Animation frame rate (None = from source, else 30)",
    )
    loops: int = Field(
        default=1,
        ge=0,
        description="Terminal playback repetitions for animations (0 = forever)",
    )

    @property
    def format(self) -> OutputFormat:
        """Output format inferred from the path."""
        return OutputFormat.from_path(self.path)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class Img2AsciiSettings(BaseModel):
    """Main application settings."""

    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> Img2AsciiSettings:
    """Get default application settings."""
    return Img2AsciiSettings()
