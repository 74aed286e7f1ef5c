# listings_processor/utils/logging_utils.py
"""Logging utilities for the listings cleaning pipeline"""

import logging
import os
from typing import Optional
import sys

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_LEVEL = logging.INFO
LOGGER_NAMESPACE = "listings_processor"


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL,
                  log_file: Optional[str] = None,
                  log_format: str = DEFAULT_LOG_FORMAT,
                  propagate: bool = False) -> logging.Logger:
    """
    Attach console and file handlers to the pipeline's namespace logger

    Only loggers under ``listings_processor`` are configured, so a host
    application's root logger is left alone. Calling this again replaces the
    handlers installed by the previous call.

    Args:
        log_level: Logging level for every pipeline stage
        log_file: Run log path, None to log to stdout only
        log_format: Logging format string
        propagate: Also pass records on to the root logger

    Returns:
        The configured namespace logger
    """
    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(log_level)
    package_logger.propagate = propagate
    return package_logger


def get_logger(name: str, log_level: Optional[int] = None) -> logging.Logger:
    """
    Get a stage logger, namespaced under ``listings_processor``

    Args:
        name: Component name, e.g. "DataCleaner"
        log_level: Optional level overriding the namespace level

    Returns:
        Logger for the component
    """
    logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")

    if log_level is not None:
        logger.setLevel(log_level)

    return logger
