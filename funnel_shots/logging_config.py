"""Console logging for the funnel_shots package.

Modules log through ``logging.getLogger(__name__)`` and stay silent until an
application calls :func:`setup_logging` once at startup, typically with the
registry's ``logging.level``.
"""

import logging
import sys
from typing import Union

PACKAGE_LOGGER = "funnel_shots"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str]) -> int:
    """Accept a numeric level or a name such as "debug"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach one stdout handler to the package logger and set its level.

    Calling again only changes the level; handlers are never duplicated.

    Returns:
        The ``funnel_shots`` package logger.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
