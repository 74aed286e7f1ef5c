# listings_processor/core/modules/transformer.py
"""Data transformation module, handling type coercion and derived attributes"""

import pandas as pd
import numpy as np
from typing import Dict, List, Optional, Tuple

from listings_processor.core.modules.base import BaseModule
from listings_processor.core.settings import ORDERED_LEVELS
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("DataTransformer")

# Column -> parse function name
DEFAULT_TYPE_MAP = {
    'id': 'category',
    'host_since': 'date',
    'location': 'string',
    'lga': 'category',
    'property_type': 'category',
    'accommodates': 'ordered',
    'bathrooms': 'ordered',
    'bedrooms': 'ordered',
    'guests_included': 'ordered',
    'price': 'currency',
    'number_of_reviews': 'count',
    'instant_bookable': 'category',
    'lga_area_km2': 'currency',
    'lga_density': 'currency',
}

CURRENCY_DECORATIONS = r'[\$,\s]'
LOCATION_PARTS = ['suburb', 'state', 'country']


def _present(series: pd.Series) -> pd.Series:
    """Mask of raw values that carry something to parse"""
    return series.notna() & series.astype(str).str.strip().ne('')


def _clean_string(value):
    if pd.isna(value):
        return np.nan
    value = str(value).strip()
    return value if value else np.nan


def categorical_to_numeric(series: pd.Series) -> pd.Series:
    """Numeric view of an ordered categorical column, nulls stay NaN"""
    return pd.to_numeric(series.astype(object), errors='coerce').astype(float)


class DataTransformer(BaseModule):
    """Turns raw text columns into typed columns and computes derived attributes"""

    def __init__(self, ordered_levels: Optional[Dict[str, List[float]]] = None,
                 date_format: str = '%Y-%m-%d'):
        """
        Initialize the data transformer

        Args:
            ordered_levels: Admissible levels per ordered categorical column
            date_format: strptime format of date columns
        """
        super().__init__()
        self.ordered_levels = ordered_levels or ORDERED_LEVELS
        self.date_format = date_format
        self.coercion_failures = {}
        logger.info(f"Initialized DataTransformer: date_format={date_format}, "
                    f"ordered columns={list(self.ordered_levels.keys())}")

    @staticmethod
    def parse_currency(series: pd.Series) -> pd.Series:
        """Strip currency symbols and thousands separators, then parse to float"""
        stripped = series.astype(str).str.replace(CURRENCY_DECORATIONS, '', regex=True)
        return pd.to_numeric(stripped.where(series.notna()), errors='coerce').astype(float)

    @staticmethod
    def parse_count(series: pd.Series) -> pd.Series:
        """Parse a whole-number count; decorated or fractional values become null"""
        numeric = pd.to_numeric(series.astype(str).str.strip().where(series.notna()), errors='coerce').astype(float)
        return numeric.where(numeric % 1 == 0)

    def parse_date(self, series: pd.Series) -> pd.Series:
        return pd.to_datetime(series, format=self.date_format, errors='coerce')

    @staticmethod
    def parse_ordered(series: pd.Series, levels: List[float]) -> pd.Series:
        """
        Parse an ordered categorical column against its fixed level set

        Values that are not numeric, or numeric but outside ``levels``, become
        null. They never extend the level set.
        """
        levels = [float(level) for level in levels]
        numeric = pd.to_numeric(series.astype(str).str.strip().where(series.notna()), errors='coerce')
        numeric = numeric.where(numeric.isin(levels))
        return pd.Series(pd.Categorical(numeric, categories=levels, ordered=True),
                         index=series.index, name=series.name)

    @staticmethod
    def parse_category(series: pd.Series) -> pd.Series:
        return series.map(_clean_string).astype('category')

    @staticmethod
    def parse_string(series: pd.Series) -> pd.Series:
        return series.map(lambda value: value if isinstance(value, str) else np.nan).astype(object)

    def coerce_types(self, df: pd.DataFrame, type_map: Optional[Dict[str, str]] = None) -> pd.DataFrame:
        """
        Coerce every mapped column with its parse function

        Parse failures become nulls instead of raising; the number of values
        lost per column is kept in ``coercion_failures``.

        Args:
            df: Joined DataFrame with raw text columns
            type_map: Mapping from column to parse kind: 'category', 'ordered',
                      'currency', 'count', 'date', 'string'

        Returns:
            DataFrame with typed columns
        """
        type_map = type_map or DEFAULT_TYPE_MAP
        result_df = df.copy()

        for col, kind in type_map.items():
            if col not in df.columns:
                continue

            raw = df[col]
            if kind == 'category':
                parsed = self.parse_category(raw)
            elif kind == 'ordered':
                parsed = self.parse_ordered(raw, self.ordered_levels[col])
            elif kind == 'currency':
                parsed = self.parse_currency(raw)
            elif kind == 'count':
                parsed = self.parse_count(raw)
            elif kind == 'date':
                parsed = self.parse_date(raw)
            elif kind == 'string':
                parsed = self.parse_string(raw)
            else:
                raise ValueError(f"Unknown parse kind '{kind}' for column '{col}'")

            failures = int((_present(raw) & parsed.isna()).sum())
            self.coercion_failures[col] = failures
            result_df[col] = parsed

            self.log_operation({
                'operation': 'coerce_type',
                'column': col,
                'from_type': str(raw.dtype),
                'to_type': kind,
                'failures': failures
            })
            if failures:
                logger.warning(f"Coercion of column '{col}' to {kind}: {failures} values could not be parsed")
            else:
                logger.info(f"Coerced column '{col}' from {raw.dtype} to {kind}")

        return result_df

    @staticmethod
    def split_location(series: pd.Series, delimiter: str = ',') -> pd.DataFrame:
        """
        Split a "suburb, state, country" string into three columns

        Parts are kept untrimmed. Anything other than exactly two delimiters
        yields nulls for all three parts.
        """
        def _split(value) -> Tuple:
            if not isinstance(value, str) or value.count(delimiter) != 2:
                return (None, None, None)
            return tuple(value.split(delimiter))

        return pd.DataFrame(series.map(_split).tolist(), index=series.index,
                            columns=LOCATION_PARTS, dtype=object)

    def derive_attributes(self, df: pd.DataFrame, delimiter: str = ',') -> pd.DataFrame:
        """
        Compute price per guest, LGA population and the location parts

        Division by a zero ``guests_included`` leaves an infinite
        ``price_per_guest``, removed later by the missing value scan.

        Args:
            df: Coerced DataFrame
            delimiter: Separator of the ``location`` parts

        Returns:
            DataFrame with derived columns added and ``location`` dropped
        """
        result_df = df.copy()

        guests = categorical_to_numeric(result_df['guests_included'])
        with np.errstate(divide='ignore', invalid='ignore'):
            result_df['price_per_guest'] = (result_df['price'] / guests).round(2)
        non_finite = int((~np.isfinite(result_df['price_per_guest'])).sum())
        self.log_operation({
            'operation': 'derive_attribute',
            'column': 'price_per_guest',
            'non_finite': non_finite
        })

        result_df['lga_population'] = result_df['lga_area_km2'] * result_df['lga_density']
        self.log_operation({
            'operation': 'derive_attribute',
            'column': 'lga_population'
        })

        if 'location' in result_df.columns:
            parts = self.split_location(result_df['location'], delimiter=delimiter)
            invalid = int(parts['suburb'].isna().sum())
            result_df = pd.concat([result_df.drop(columns=['location']), parts], axis=1)
            self.log_operation({
                'operation': 'split_location',
                'delimiter': delimiter,
                'invalid': invalid
            })
            if invalid:
                logger.warning(f"{invalid} location values do not split into {len(LOCATION_PARTS)} parts")

        logger.info(f"Derived attributes: price_per_guest ({non_finite} non-finite), "
                    f"lga_population, {', '.join(LOCATION_PARTS)}")
        return result_df
