# Copyright(C) 2023 Anders Logg
# Licensed under the MIT License

"""Logging setup for dtcc-lift.

Each source name gets one ``logging.Logger`` with a single
``LoggingHandler`` printing to the console shared with the progress bar.
Modules use the callback tuple::

    debug, info, warning, error, critical = get_logger("dtcc-lift")

``error`` and ``critical`` log the message and then raise ``RuntimeError``.
Conditions a lift recovers from are therefore logged with ``warning``.
"""

import logging as _logging
from contextlib import contextmanager
from typing import Callable, Dict, NamedTuple, Union

from .handler import LoggingHandler
from .progress import get_console

DEFAULT_SOURCE = "dtcc-lift"


class LogCallbacks(NamedTuple):
    debug: Callable[[str], None]
    info: Callable[[str], None]
    warning: Callable[[str], None]
    error: Callable[[str], None]
    critical: Callable[[str], None]


loggers: Dict[str, LogCallbacks] = {}
_logger_objects: Dict[str, _logging.Logger] = {}
_global_log_level: int = _logging.INFO


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = _logging.getLevelName(level.upper())
        if isinstance(value, int):
            return value
    raise ValueError(
        f"Invalid log level {level!r}. Valid levels are DEBUG, INFO, WARNING, ERROR, CRITICAL."
    )


def _ensure_logger(name: str) -> _logging.Logger:
    logger = _logger_objects.get(name)
    if logger is None:
        logger = _logging.getLogger(name)
        logger.setLevel(_global_log_level)
        logger.propagate = False
        logger.handlers = [
            h for h in logger.handlers if not isinstance(h, LoggingHandler)
        ]
        logger.addHandler(LoggingHandler(source_name=name, console=get_console()))
        _logger_objects[name] = logger
    return logger


def _raising(log: Callable[[str], None]) -> Callable[[str], None]:
    def callback(message):
        log(message)
        raise RuntimeError(message)

    return callback


def init_logging(name: str = DEFAULT_SOURCE) -> LogCallbacks:
    "Initialize logging for given source name."
    logger = _ensure_logger(name)
    callbacks = LogCallbacks(
        logger.debug,
        logger.info,
        logger.warning,
        _raising(logger.error),
        _raising(logger.critical),
    )
    loggers[name] = callbacks
    return callbacks


def get_logger(name: str = DEFAULT_SOURCE) -> LogCallbacks:
    "Get logger callback tuple for given source name."
    if name not in loggers:
        init_logging(name)
    return loggers[name]


def get_python_logger(name: str = DEFAULT_SOURCE) -> _logging.Logger:
    """Get the configured ``logging.Logger`` of a source name."""
    return _ensure_logger(name)


def set_log_level(level: Union[str, int]):
    """Set the level of every configured logger, and of those created later."""
    global _global_log_level

    _global_log_level = _coerce_level(level)
    for logger in _logger_objects.values():
        logger.setLevel(_global_log_level)


@contextmanager
def log_level(level: Union[str, int]):
    """Temporarily change the level of every configured logger."""
    previous = _global_log_level
    set_log_level(level)
    try:
        yield
    finally:
        set_log_level(previous)
