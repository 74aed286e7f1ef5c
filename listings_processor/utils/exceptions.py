# listings_processor/utils/exceptions.py
"""Exception hierarchy for the listings cleaning pipeline.

Per-record problems (unparseable values, join misses, rule violations,
outliers) are handled inside their stage and never raised. Only problems with
the structure of a whole input, or with the configuration, abort a run.
"""

from typing import Iterable, Optional


class ListingsProcessorError(Exception):
    """Base class for all errors raised by the pipeline"""


class FatalInputError(ListingsProcessorError):
    """An input table is empty or lacks a required column"""

    def __init__(self, message: str, missing_columns: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing_columns = list(missing_columns or [])


class ConfigurationError(ListingsProcessorError):
    """Configuration file is unreadable or holds an invalid value"""
