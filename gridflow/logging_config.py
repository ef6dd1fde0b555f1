"""Console logging for the GridFlow editor."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "gridflow"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Route ``gridflow.*`` records to stdout at ``level``.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    return logger
