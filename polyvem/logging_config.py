# polyvem/logging_config.py
"""
LOGGING SETUP
=============

PURPOSE:
--------
Every polyvem module logs through `logging.getLogger(__name__)`, so all
records end up under the "polyvem" namespace:

    polyvem.assembly         cell loop progress, Neumann / Dirichlet summary
    polyvem.kernel.boundary  reduction and trivial-equation details (DEBUG)
    polyvem.geometry.cell    star-point fallbacks (DEBUG)
    polyvem.post             stress recovery

The library never touches logging configuration on import. Scripts and
demos call setup_logging() once to route those records to stdout (and
optionally a file).

USAGE:
------
    setup_logging(logging.DEBUG, log_file="artifacts/assembly.log")
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "polyvem"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a stdout handler (and optionally a file handler) to the
    "polyvem" logger.

    Calling it again replaces the handlers installed by the previous call;
    the replaced handlers are closed, so a previous log file is released.

    Parameters:
    -----------
    level : int
        Logging level for the package logger and its handlers
    log_file : str, optional
        Path of a log file, overwritten on each call

    Returns:
    --------
    logging.Logger
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", "stdout" + (f" and {log_file}" if log_file else ""))
    return logger
