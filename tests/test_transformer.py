"""
Tests for type coercion and derived attributes
"""

import numpy as np
import pandas as pd
import pytest

from listings_processor.core.modules.transformer import DataTransformer, categorical_to_numeric


@pytest.fixture
def transformer():
    return DataTransformer()


@pytest.fixture
def joined_frame():
    """Joined but still textual records."""
    return pd.DataFrame({
        'id': ['1', '2', '3'],
        'host_since': ['2015-06-01', 'yesterday', None],
        'location': ['Melbourne, Victoria, Australia', 'Melbourne, Australia', 'Fitzroy, VIC, Australia'],
        'lga': ['Melbourne', 'Melbourne', 'Yarra'],
        'property_type': ['Apartment', ' ', 'House'],
        'accommodates': ['4', '40', '2'],
        'bathrooms': ['1.5', '1.25', '1'],
        'bedrooms': ['2', '1', None],
        'price': ['$100.00', '$1,250.50', '$2.00'],
        'guests_included': ['3', '0', '2'],
        'number_of_reviews': ['10', 'many', '0'],
        'instant_bookable': ['t', 'f', 'f'],
        'lga_area_km2': ['37.7', '37.7', '19.5'],
        'lga_density': ['4,519', '4,519', '4,712'],
    })


class TestCoercion:
    """Test per-column parse functions."""

    def test_currency_decorations_are_stripped(self):
        parsed = DataTransformer.parse_currency(pd.Series(['$2.00', '$1,234.50', 'abc', None]))

        assert parsed.iloc[0] == 2.0
        assert parsed.iloc[1] == 1234.5
        assert parsed.iloc[2:].isna().all()

    def test_counts_reject_decorated_and_fractional_values(self):
        parsed = DataTransformer.parse_count(pd.Series(['12', ' 0 ', '-3', '$5', '2.5', '1,000', None]))

        assert parsed.tolist()[:3] == [12.0, 0.0, -3.0]
        assert parsed.iloc[3:].isna().all()
        assert parsed.dtype == float

    def test_ordered_values_outside_domain_become_null(self):
        parsed = DataTransformer.parse_ordered(pd.Series(['1', '15', '40', 'x']), [float(i) for i in range(1, 17)])

        assert parsed.cat.ordered
        assert list(parsed.cat.categories) == [float(i) for i in range(1, 17)]
        assert categorical_to_numeric(parsed).tolist()[:2] == [1.0, 15.0]
        assert parsed.iloc[2:].isna().all()

    def test_coerce_types_counts_failures(self, transformer, joined_frame):
        result = transformer.coerce_types(joined_frame)

        assert transformer.coercion_failures['accommodates'] == 1
        assert transformer.coercion_failures['bathrooms'] == 1
        assert transformer.coercion_failures['number_of_reviews'] == 1
        assert transformer.coercion_failures['host_since'] == 1
        # a null raw value is not a parse failure
        assert transformer.coercion_failures['bedrooms'] == 0
        assert pd.isna(result.loc[1, 'host_since'])
        assert result.loc[0, 'host_since'] == pd.Timestamp('2015-06-01')
        assert pd.isna(result.loc[1, 'property_type'])

    def test_coerced_dtypes(self, transformer, joined_frame):
        result = transformer.coerce_types(joined_frame)

        assert isinstance(result['lga'].dtype, pd.CategoricalDtype)
        assert not result['property_type'].cat.ordered
        assert result['accommodates'].cat.ordered
        assert result['price'].dtype == float
        assert result.loc[1, 'price'] == 1250.5
        assert result.loc[0, 'lga_density'] == 4519.0
        assert pd.api.types.is_datetime64_any_dtype(result['host_since'])


class TestDerivedAttributes:
    """Test derived columns."""

    def test_price_per_guest_and_population(self, transformer, joined_frame):
        result = transformer.derive_attributes(transformer.coerce_types(joined_frame))

        assert result.loc[0, 'price_per_guest'] == 33.33
        assert np.isinf(result.loc[1, 'price_per_guest'])
        assert result.loc[2, 'price_per_guest'] == 1.0
        assert result.loc[0, 'lga_population'] == 37.7 * 4519.0

    def test_location_split_keeps_untrimmed_parts(self, transformer, joined_frame):
        result = transformer.derive_attributes(transformer.coerce_types(joined_frame))

        assert 'location' not in result.columns
        assert result.loc[0, 'suburb'] == 'Melbourne'
        assert result.loc[0, 'state'] == ' Victoria'
        assert result.loc[0, 'country'] == ' Australia'

    def test_location_with_one_delimiter_yields_nulls(self):
        parts = DataTransformer.split_location(pd.Series(['Melbourne, Australia', 'a,b,c,d', None]))

        assert parts.isna().all().all()
