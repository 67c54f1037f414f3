from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

DEBUG_ENV = "CSVOPAL_DEBUG"
# The shell original traced when DEBUG was set; honour it too.
DEBUG_ENVS = (DEBUG_ENV, "DEBUG")
LOG_FORMAT = "%(levelname)s: %(message)s"


def debug_from_env() -> bool:
    return any(os.environ.get(name) for name in DEBUG_ENVS)


def configure_logging(debug: bool = False, stream: Optional[TextIO] = None) -> None:
    """Send csvopal log records to stderr; DEBUG when tracing is on, WARNING otherwise.

    Safe to call again: the previous handler is replaced.
    """
    logger = logging.getLogger("csvopal")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
