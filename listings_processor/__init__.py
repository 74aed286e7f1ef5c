# listings_processor/__init__.py
"""
Listings Cleaning Pipeline
Joins a listings snapshot with an LGA reference table, coerces types, enforces
consistency rules and treats outliers to produce an analysis-ready table.
"""

from listings_processor.core.processor import ListingsProcessor
from listings_processor.core.modules.base import BaseModule
from listings_processor.core.modules.joiner import DataJoiner
from listings_processor.core.modules.cleaner import DataCleaner
from listings_processor.core.modules.normalizer import DataNormalizer
from listings_processor.core.modules.transformer import DataTransformer
from listings_processor.core.modules.validator import DataValidator

__version__ = "1.0.0"
__all__ = [
    'ListingsProcessor',
    'BaseModule',
    'DataJoiner',
    'DataCleaner',
    'DataNormalizer',
    'DataTransformer',
    'DataValidator'
]
