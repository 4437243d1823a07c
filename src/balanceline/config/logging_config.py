"""Logging configuration."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure application logging.

    Logs go to stderr; stdout is reserved for the statusline text.
    BALANCELINE_LOG_LEVEL overrides the default WARNING level.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get("BALANCELINE_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
