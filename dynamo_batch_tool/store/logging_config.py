"""
Logging configuration for store commands and operations.

Verbosity levels map to:
    0 (no flag)  WARNING
    1 (-v)       INFO
    2 (-vv)      DEBUG
    3 (-vvv)     DEBUG, including boto3/botocore wire logging
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbose: int = 0) -> None:
    """
    Configure root logging based on verbosity count.

    Args:
        verbose: Number of -v flags passed on the command line
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    # Library loggers are noisy; only let them through at TRACE
    library_level = logging.DEBUG if verbose >= 3 else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
