"""
utils/logger.py
---------------
Logging setup for the projects database.
Modules call `get_logger(__name__)`; the root logger is configured on first use
with the level from LOG_LEVEL and can be reconfigured with `configure_logging`.
"""

import logging
import sys
from typing import Union

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_HANDLER_NAME = "projects-db-stdout"


def _find_handler(root: logging.Logger) -> Union[logging.Handler, None]:
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def configure_logging(level: Union[str, int] = LOG_LEVEL) -> None:
    """
    Set the root level and make sure exactly one stdout handler is installed.

    Calling it again only changes the level; it never stacks handlers.

    Args:
        level: A level name such as ``"DEBUG"`` or a logging constant.
            Unknown names fall back to INFO.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    if _find_handler(root) is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, configuring the root logger on first use.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if _find_handler(logging.getLogger()) is None:
        configure_logging()
    return logging.getLogger(name)
