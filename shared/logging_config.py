"""Logging setup for the calculator command line.

Library modules only create module loggers; handlers are attached here,
once, by the entry point.
"""
import logging
import sys
from typing import Optional

LOGGER_NAMES = ("shared", "fitting", "setout", "calc")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures console (and optionally file) output for the project loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate output when called more than once
        if logger.hasHandlers():
            logger.handlers.clear()
        for h in handlers:
            logger.addHandler(h)
        logger.propagate = False

    logging.getLogger("calc").debug("Logging initialized.")
