"""Shared logging setup for applications embedding groupstats."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_file: Path | str | None = None,
    mode: str = "a",
) -> logging.Logger:
    """Configure logging with a stream handler and an optional file handler.

    Falls back to stream-only logging if the file can't be opened.

    Args:
        level: Logging level, as an int or a name such as "DEBUG".
        log_file: Optional file to also write log records to.
        mode: File open mode ("w" to overwrite, "a" to append).

    Returns:
        The groupstats package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, mode=mode))
        except OSError as exc:
            print(f"Warning: could not open log file {log_path}: {exc}", file=sys.stderr)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    logger = logging.getLogger("groupstats")
    logger.debug("Logging configured at %s", logging.getLevelName(level))
    return logger
