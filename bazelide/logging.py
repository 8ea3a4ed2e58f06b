"""Logger setup shared by the bazelide CLI, the service and library code."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Iterable, Sequence

from .models import Diagnostic

ROOT_LOGGER = "bazelide"
CONSOLE_FORMAT = "[bazelide] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return ``bazelide`` or its ``bazelide.<component>`` child."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Send bazelide records to stderr and, optionally, to ``log_file``.

    ``quiet`` keeps warnings and errors only. ``verbose`` takes precedence and
    also shows every bazel command line.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    while logger.handlers:
        handler = logger.handlers[0]
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


def format_command(argv: Sequence[str]) -> str:
    """Shell-quoted command line, suitable for pasting into a terminal."""
    return shlex.join(list(argv))


def log_diagnostics(logger: logging.Logger, diagnostics: Iterable[Diagnostic]) -> int:
    count = 0
    for diagnostic in diagnostics:
        logger.warning(
            "%s:%d:%d: %s",
            diagnostic.path,
            diagnostic.line,
            diagnostic.column,
            diagnostic.message,
        )
        count += 1
    return count


__all__ = [
    "configure_logging",
    "format_command",
    "get_logger",
    "log_diagnostics",
]
