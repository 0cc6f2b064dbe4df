"""This module defines log formats and sets up log handlers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Sequence

from .config import LiteQueryConfig
from .utils.appdirs import get_log_path


__all__ = [
    "scoped_logger",
    "scoped_logger_name",
    "LOG_FMT_LONG",
    "setup_logging",
]

LOG_FMT_LONG = logging.Formatter(
    fmt="%(asctime)s %(module)s %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def scoped_logger_name(module_name: str, config_name: str = "litequery") -> str:
    """
    Returns a logger name for the module ``module_name``, scoped to the given config.

    :param module_name: Module name.
    :param config_name: Config name.
    :returns: Scoped logger name.
    """
    if config_name == "litequery":
        return module_name
    else:
        return f"{config_name}-{module_name}"


def scoped_logger(module_name: str, config_name: str = "litequery") -> logging.Logger:
    """
    Returns a logger for the module ``module_name``, scoped to the given config.

    :param module_name: Module name.
    :param config_name: Config name.
    :returns: Logger instances scoped to the config.
    """
    return logging.getLogger(scoped_logger_name(module_name, config_name))


def setup_logging(
    config_name: str,
    file: bool = True,
    stderr: bool = True,
) -> Sequence[logging.Handler]:
    """
    Set up logging to a rotating log file and / or stderr.

    :param config_name: Config name to determine log level and namespace for loggers.
        See :meth:`scoped_logger_name` for how the logger name is determined.
    :param file: Whether to log to files.
    :param stderr: Whether to log to stderr.
    :returns: Log handlers.
    """
    level = LiteQueryConfig(config_name).get("app", "log_level")
    root_logger = scoped_logger("litequery", config_name)
    root_logger.setLevel(level)

    handlers: list[logging.Handler] = []

    if file:
        logfile = get_log_path("litequery", f"{config_name}.log")
        log_handler_file = RotatingFileHandler(logfile, maxBytes=10**7, backupCount=1)
        log_handler_file.setFormatter(LOG_FMT_LONG)
        log_handler_file.setLevel(level)
        root_logger.addHandler(log_handler_file)
        handlers.append(log_handler_file)

    if stderr:
        log_handler_stream = logging.StreamHandler()
        log_handler_stream.setFormatter(LOG_FMT_LONG)
        log_handler_stream.setLevel(level)
        root_logger.addHandler(log_handler_stream)
        handlers.append(log_handler_stream)

    return handlers
