"""Logging helpers for the unityatlas analyzer and CLI."""

from __future__ import annotations

import logging
from pathlib import Path

from unityatlas.config import UNITYATLAS_LOG_LEVEL

_LOGGER_NAME = "unityatlas"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the unityatlas hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the unityatlas logger with stderr output and optional file sink."""
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(UNITYATLAS_LOG_LEVEL)
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[unityatlas] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
