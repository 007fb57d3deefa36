"""Utility functions for img2ascii.

This module provides utility functions including:

- Logging setup and configuration
- Conversion statistics tracking
"""

from img2ascii.utils.logging import (
    ConversionLogger,
    ConversionStats,
    configure_logging,
)

__all__ = [
    "ConversionLogger",
    "ConversionStats",
    "configure_logging",
]
