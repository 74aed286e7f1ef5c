# listings_processor/core/settings.py
"""Default pipeline configuration"""

import copy
from typing import Dict, List

# Raw listing column -> pipeline column
LISTING_COLUMNS = {
    'id': 'id',
    'host_since': 'host_since',
    'street': 'location',
    'neighbourhood_cleansed': 'lga',
    'property_type': 'property_type',
    'accommodates': 'accommodates',
    'bathrooms': 'bathrooms',
    'bedrooms': 'bedrooms',
    'price': 'price',
    'guests_included': 'guests_included',
    'number_of_reviews': 'number_of_reviews',
    'instant_bookable': 'instant_bookable',
}


def _float_range(start: float, stop: float, step: float = 1.0) -> List[float]:
    levels = []
    value = start
    while value <= stop:
        levels.append(float(value))
        value += step
    return levels


ORDERED_LEVELS = {
    'accommodates': _float_range(1, 16),
    'bathrooms': _float_range(0, 8, 0.5),
    'bedrooms': _float_range(0, 10),
    'guests_included': _float_range(0, 16),
}

OUTPUT_COLUMNS = [
    'id', 'host_since', 'suburb', 'state', 'country', 'lga',
    'property_type', 'accommodates', 'bathrooms', 'bedrooms',
    'guests_included', 'price', 'price_per_guest', 'number_of_reviews',
    'instant_bookable', 'lga_area_km2', 'lga_density', 'lga_population',
    'price_duplicate',
]

DEFAULT_CONFIG = {
    'input': {
        'listing_columns': LISTING_COLUMNS,
        'reference_columns': {
            'name': 'Local government area',
            'area': 'Area (km2)',
            'density': 'Density (/km2)',
        },
    },
    'coercion': {
        'date_format': '%Y-%m-%d',
        'ordered_levels': ORDERED_LEVELS,
        'location_delimiter': ',',
    },
    'rules': {
        'min_price': 5.0,
        'price_ceiling': 5000.0,
    },
    'outliers': {
        'columns': ['price', 'price_per_guest', 'number_of_reviews'],
        'multiplier': 1.5,
        'strategy': 'median',
    },
    'transform': {
        'column': 'price_duplicate',
        'threshold': 3.0,
    },
}


# Mappings whose keys are data, not settings: an override replaces them whole
REPLACED_WHOLE = ('listing_columns',)


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """
    Deep-merge ``overrides`` into a copy of ``base``

    Nested dicts are merged key by key, except the mappings named in
    REPLACED_WHOLE; any other value replaces the default.
    """
    merged = copy.deepcopy(base)
    for key, value in (overrides or {}).items():
        if key not in REPLACED_WHOLE and isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
