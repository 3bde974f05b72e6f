# === FILE: contact_scout/logger.py ===
"""Logging setup for **ContactScout**.

All modules log through children of one named logger, ``ContactScout``
(``ContactScout.frontier``, ``ContactScout.orchestrator`` …), so a single
call to :func:`configure` controls the whole package::

    from contact_scout.logger import get_logger
    log = get_logger("orchestrator")
    log.info("Run started")

Console output goes to stdout; an optional log file is rotated at 5 MiB
with three backups.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, TextIO, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME: Final[str] = "ContactScout"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(
    fmt: str, log_file: Optional[Union[str, Path]], stream: Optional[TextIO]
) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """(Re)configure the ``ContactScout`` logger.

    Parameters
    ----------
    level
        Numeric or textual level, e.g. ``"DEBUG"``.
    log_file
        Optional path of a rotating log file; console-only when *None*.
    log_format
        :class:`logging.Formatter` format string.
    replace_handlers
        Close and drop handlers installed by an earlier call.
    stream
        Console stream, ``sys.stdout`` by default.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(log_format, log_file, stream):
        root.addHandler(handler)
    # child loggers report through this one only
    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """``ContactScout`` itself, or ``ContactScout.<suffix>``."""
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "configure", "get_logger", "init_logging", "logger"]
