"""
logger.py — Console / file logging for CYCLOPS scripts.

Library modules under ``cyclops`` only create module loggers
(``logging.getLogger(__name__)``); handlers are attached here, by the
scripts that drive them.
"""

import logging
import sys
from typing import Optional, Union

_FORMAT = "%(asctime)s | %(name)-18s | %(levelname)-7s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level!r}")
        return resolved
    return level


def get_logger(
    name: str = "cyclops",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Create or retrieve a named logger with console (and optional file) output.

    Parameters
    ----------
    name : str
        Logger name. Passing ``"cyclops"`` also routes the core library's
        records through these handlers.
    level : int or str
        Logging level, e.g. ``logging.DEBUG`` or ``"debug"``.
    log_file : str, optional
        If provided, also log to this file path.

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger  # already configured

    logger.setLevel(_resolve_level(level))
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
