"""Console logging shared by the hub modules."""

import logging
import os
from typing import Optional, Union

from uvicorn.logging import DefaultFormatter

FORMAT = "%(levelprefix)s %(asctime)s [%(threadName)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER = "nexus"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def get_logger(name: str = ROOT_LOGGER, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Return a logger whose records end up in the uvicorn-styled "nexus" handler.

    The stream handler lives on the "nexus" logger only and is attached once;
    module loggers ("nexus.agents...") reach it through propagation.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        resolved = _resolve_level(level)
        root.setLevel(resolved)
        handler = logging.StreamHandler()
        handler.setLevel(resolved)
        handler.setFormatter(DefaultFormatter(FORMAT, datefmt=DATE_FORMAT, use_colors=False))
        root.addHandler(handler)

    return logging.getLogger(name)
