"""Command-line interface for img2ascii.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for frame rendering
- Terminal playback of animations
- Quiet mode for scripting
- Detailed error reporting
"""

from img2ascii.cli.app import cli, main

__all__ = ["cli", "main"]
