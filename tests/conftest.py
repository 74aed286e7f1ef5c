"""
Pytest fixtures for listings pipeline tests
"""

import pytest
import pandas as pd
import numpy as np

from listings_processor.core.settings import ORDERED_LEVELS


BASE_LISTING = {
    'id': '1',
    'host_since': '2015-06-01',
    'street': 'Melbourne, VIC, Australia',
    'neighbourhood_cleansed': 'Melbourne',
    'property_type': 'Apartment',
    'accommodates': '4',
    'bathrooms': '1.0',
    'bedrooms': '2',
    'price': '$150.00',
    'guests_included': '2',
    'number_of_reviews': '10',
    'instant_bookable': 'f',
}


def make_listing(**overrides):
    listing = dict(BASE_LISTING)
    listing.update(overrides)
    return listing


@pytest.fixture
def listing_factory():
    """Build one raw listing row, overriding any default field."""
    return make_listing


@pytest.fixture
def raw_reference():
    """Scraped LGA table with prefixed names and formatted numbers."""
    return pd.DataFrame({
        'Local government area': ['City of Melbourne', 'City of Yarra', 'Shire of Yarra Ranges'],
        'Area (km2)': ['37.7', '19.5', '2,468.0'],
        'Density (/km2)': ['4,519', '4,712', '61'],
        'Population': ['170,000', '92,000', '150,000'],
    })


@pytest.fixture
def clean_listings():
    """Twelve valid listings with prices between $100 and $210."""
    rows = []
    for i in range(12):
        rows.append(make_listing(
            id=str(100 + i),
            neighbourhood_cleansed='Melbourne' if i % 2 == 0 else 'Yarra',
            price=f"${100 + i * 10:.2f}",
            number_of_reviews=str(5 + i),
            guests_included=str(1 + i % 3),
        ))
    return pd.DataFrame(rows)


@pytest.fixture
def dirty_listings(clean_listings):
    """Valid listings plus one record per data quality problem, keyed by id."""
    dirty = [
        make_listing(id='cheap', price='$2.00'),
        make_listing(id='clamp', accommodates='4', guests_included='6'),
        make_listing(id='nomatch', neighbourhood_cleansed='Nowhere'),
        make_listing(id='badloc', street='Melbourne, Australia'),
        make_listing(id='zeroguest', guests_included='0'),
        make_listing(id='ceiling', price='$6,000.00'),
        make_listing(id='negrev', number_of_reviews='-3'),
        make_listing(id='baddomain', accommodates='40'),
        make_listing(id='baddate', host_since='not a date'),
        make_listing(id='spike', price='$3,000.00'),
    ]
    return pd.concat([clean_listings, pd.DataFrame(dirty)], ignore_index=True)


def ordered(values, column):
    levels = ORDERED_LEVELS[column]
    return pd.Categorical([float(v) if v is not None else np.nan for v in values],
                          categories=levels, ordered=True)


@pytest.fixture
def typed_listings():
    """Small already-typed frame for rule tests: 'b', 'd', 'e', 'f', 'g' each break one rule."""
    return pd.DataFrame({
        'price': [150.0, 2.0, 200.0, 120.0, 150.0, 150.0, 150.0],
        'price_per_guest': [75.0, 1.0, 50.0, -1.0, 75.0, 75.0, 75.0],
        'number_of_reviews': [10.0, 3.0, 0.0, 8.0, 4.0, 4.0, 4.0],
        'lga_area_km2': [37.7, 37.7, 19.5, 19.5, -1.0, 37.7, 19.5],
        'lga_density': [4519.0, 4519.0, 4712.0, 4712.0, 4519.0, -5.0, 4712.0],
        'lga_population': [37.7 * 4519.0, 37.7 * 4519.0, 19.5 * 4712.0, 19.5 * 4712.0, 1000.0, 1000.0, -1.0],
        'accommodates': ordered([4, 2, 4, 3, 2, 2, 2], 'accommodates'),
        'guests_included': ordered([6, 2, 4, 1, 2, 2, 2], 'guests_included'),
    }, index=['a', 'b', 'c', 'd', 'e', 'f', 'g'])
