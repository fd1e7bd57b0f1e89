"""
Utility Module for the Multicore Scheduler Core

Helpers that sit outside the scheduling decisions themselves. The core
modules only create loggers; attaching handlers is left to whoever embeds
the scheduler, usually through setup_logging() below.
"""

import logging
from typing import List

from config import LoggingConfig, DEFAULT_LOGGING_CONFIG, APP_NAME


# Loggers created by the scheduling core modules
CORE_LOGGERS: List[str] = [
    "scheduler_core",
    "wait_queue",
    "validators",
]


def setup_logging(config: LoggingConfig = DEFAULT_LOGGING_CONFIG) -> logging.Logger:
    """
    Configure the logging system for the scheduler.

    Handlers are attached to the root logger so every module logger
    propagates to them. Calling this again replaces the handlers it
    installed before instead of stacking duplicates.

    Args:
        config: Logging configuration

    Returns:
        Logger for the application
    """
    formatter = logging.Formatter(config.log_format, datefmt=config.date_format)
    root = logging.getLogger()

    for handler in list(root.handlers):
        if getattr(handler, "_scheduler_handler", False):
            root.removeHandler(handler)
            handler.close()

    handlers: List[logging.Handler] = []
    if config.log_to_console:
        handlers.append(logging.StreamHandler())
    if config.log_to_file:
        handlers.append(logging.FileHandler(config.log_file_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(config.level)
        handler._scheduler_handler = True
        root.addHandler(handler)

    root.setLevel(config.level)
    for name in CORE_LOGGERS:
        logging.getLogger(name).setLevel(config.level)

    logger = logging.getLogger(APP_NAME)
    logger.debug(f"Logging configured: level={logging.getLevelName(config.level)}, "
                 f"console={config.log_to_console}, file={config.log_to_file}")
    return logger
