"""Console / file logging for the ``planetmesh`` logger namespace.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here, by the CLI and the demo scripts.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

PACKAGE_LOGGER = "planetmesh"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach fresh handlers to the package logger and return it.

    Parameters
    ----------
    level : int
        Threshold for the logger and every handler.
    log_file : str, optional
        Also write records to this file (overwritten on each call).

    Handlers from an earlier call are closed and replaced, so repeated
    calls never duplicate output.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
