"""Logging utilities for img2ascii."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import structlog

HANDLER_MARK = "_img2ascii_handler"


@dataclass
class ConversionStats:
    """Statistics from a conversion run."""

    frame_count: int = 0
    chunk_count: int = 0
    error_count: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    frame_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate conversion duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_frame_time_ms(self) -> float | None:
        """Average time spent per frame, if any frame was rendered."""
        if not self.frame_timings_ms:
            return None
        return sum(self.frame_timings_ms) / len(self.frame_timings_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging to the console and an optional file.

    Args:
        log_file: Path to log file (no file logging if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier call instead of stacking them
    for handler in [h for h in root_logger.handlers if getattr(h, HANDLER_MARK, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        setattr(file_handler, HANDLER_MARK, True)
        root_logger.addHandler(file_handler)

    # stdout is reserved for rendered frames
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel("ERROR" if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("img2ascii")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ConversionLogger:
    """Logger for tracking conversion progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ConversionStats()

    def log_run_config(self, **settings: object) -> None:
        """Log the effective settings of a run."""
        self._logger.info("Conversion configured", **settings)

    def log_frame_complete(
        self,
        frame_index: int,
        chunk_count: int,
        duration_ms: float,
    ) -> None:
        """Log a rendered frame."""
        self._logger.debug(
            "Frame rendered",
            frame=frame_index,
            chunks=chunk_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.frame_count += 1
        self._stats.chunk_count += chunk_count
        self._stats.frame_timings_ms.append(duration_ms)

    def log_frame_error(
        self,
        frame_index: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a frame that failed to render."""
        self._logger.error(
            "Frame rendering failed",
            frame=frame_index,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((frame_index, str(error)))

    def log_output_written(self, path: Path, output_format: str, frames: int) -> None:
        """Log a written output file."""
        self._logger.info(
            "Output written",
            output=str(path),
            format=output_format,
            frames=frames,
        )

    @property
    def stats(self) -> ConversionStats:
        """Get current conversion statistics."""
        return self._stats
