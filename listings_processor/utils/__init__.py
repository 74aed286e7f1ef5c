# listings_processor/utils/__init__.py
"""Utility functions and helpers for the listings cleaning pipeline"""

from listings_processor.utils.logging_utils import setup_logging, get_logger
from listings_processor.utils.exceptions import (
    ListingsProcessorError,
    FatalInputError,
    ConfigurationError
)

__all__ = [
    'setup_logging',
    'get_logger',
    'ListingsProcessorError',
    'FatalInputError',
    'ConfigurationError'
]
