# listings_processor/core/modules/__init__.py
"""Individual pipeline stages"""

from listings_processor.core.modules.base import BaseModule
from listings_processor.core.modules.joiner import DataJoiner, prepare_listings, prepare_reference
from listings_processor.core.modules.cleaner import DataCleaner
from listings_processor.core.modules.normalizer import DataNormalizer
from listings_processor.core.modules.transformer import DataTransformer
from listings_processor.core.modules.validator import DataValidator, VALIDITY_RULES

__all__ = [
    'BaseModule',
    'DataJoiner',
    'prepare_listings',
    'prepare_reference',
    'DataCleaner',
    'DataNormalizer',
    'DataTransformer',
    'DataValidator',
    'VALIDITY_RULES'
]
