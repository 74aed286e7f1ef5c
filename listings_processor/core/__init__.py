# listings_processor/core/__init__.py
"""Pipeline orchestration and default configuration"""

from listings_processor.core.processor import ListingsProcessor
from listings_processor.core.settings import DEFAULT_CONFIG, OUTPUT_COLUMNS

__all__ = [
    'ListingsProcessor',
    'DEFAULT_CONFIG',
    'OUTPUT_COLUMNS'
]
