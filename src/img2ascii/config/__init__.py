"""Configuration management for img2ascii.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- ConversionConfig: Matching settings (font, alphabet, metric, threads)
- OutputConfig: Output path, color and animation pacing
- LoggingConfig: Logging settings
- Img2AsciiSettings: Main application settings
"""

from img2ascii.config.settings import (
    DEFAULT_FONT,
    ConversionConfig,
    Img2AsciiSettings,
    LoggingConfig,
    Metric,
    OutputConfig,
    OutputFormat,
    get_default_settings,
)

__all__ = [
    "DEFAULT_FONT",
    "ConversionConfig",
    "Img2AsciiSettings",
    "LoggingConfig",
    "Metric",
    "OutputConfig",
    "OutputFormat",
    "get_default_settings",
]
