"""Logging setup shared by all components"""

import logging
import sys
import threading
from typing import Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEBUG_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

_root_level = logging.INFO
_handler_lock = threading.Lock()


def setup_logger(name: str, level: Union[str, int, None] = None) -> logging.Logger:
    """Get a named logger with a single stream handler attached"""
    global _root_level

    if level is not None:
        _root_level = logging.getLevelName(level) if isinstance(level, str) else level

    logger = logging.getLogger(name)
    logger.setLevel(_root_level)

    with _handler_lock:
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            fmt = DEBUG_LOG_FORMAT if _root_level == logging.DEBUG else LOG_FORMAT
            handler.setFormatter(logging.Formatter(fmt))
            logger.addHandler(handler)
            logger.propagate = False

    return logger


def set_log_level(level: Union[str, int]) -> None:
    """Change the level of every logger created through setup_logger"""
    global _root_level
    _root_level = logging.getLevelName(level) if isinstance(level, str) else level

    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and logger.handlers and not logger.propagate:
            logger.setLevel(_root_level)
