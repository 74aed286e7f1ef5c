# listings_processor/core/modules/joiner.py
"""Input preparation and the listings/LGA reference join"""

import pandas as pd
from typing import Dict, Optional

from listings_processor.core.modules.base import BaseModule
from listings_processor.core.settings import LISTING_COLUMNS
from listings_processor.utils.exceptions import FatalInputError
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("DataJoiner")

AREA_PREFIX_PATTERN = r'^\s*(?:City|Shire) of\s+'
REFERENCE_COLUMNS = ['lga', 'lga_area_km2', 'lga_density']


def _require_columns(df: pd.DataFrame, columns, table_name: str) -> None:
    if df is None or len(df) == 0:
        raise FatalInputError(f"{table_name} table is empty")

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise FatalInputError(f"{table_name} table is missing required columns: {missing}",
                              missing_columns=missing)


def prepare_listings(df: pd.DataFrame, column_map: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """
    Select the consumed listing columns and give them their pipeline names

    Args:
        df: Raw listings table
        column_map: Mapping from raw column name to pipeline column name

    Returns:
        Listings DataFrame with ``street`` renamed to ``location`` and
        ``neighbourhood_cleansed`` renamed to ``lga``

    Raises:
        FatalInputError: If the table is empty or lacks a mapped column
    """
    column_map = column_map or LISTING_COLUMNS
    _require_columns(df, list(column_map.keys()), "Listings")

    result_df = df[list(column_map.keys())].rename(columns=column_map)
    logger.info(f"Prepared listings: {len(result_df)} rows, {len(result_df.columns)} columns")
    return result_df


def prepare_reference(df: pd.DataFrame, name_col: str, area_col: str, density_col: str) -> pd.DataFrame:
    """
    Subset the scraped LGA table and normalize its area names

    Leading "City of " / "Shire of " prefixes are stripped so that the names
    match the listings' ``lga`` values.

    Raises:
        FatalInputError: If the table is empty or lacks one of the columns
    """
    _require_columns(df, [name_col, area_col, density_col], "Reference")

    result_df = df[[name_col, area_col, density_col]].copy()
    result_df.columns = REFERENCE_COLUMNS
    result_df['lga'] = (result_df['lga'].astype(str)
                        .str.replace(AREA_PREFIX_PATTERN, '', regex=True)
                        .str.strip())
    logger.info(f"Prepared reference table: {len(result_df)} areas")
    return result_df


class DataJoiner(BaseModule):
    """Left join of the listings onto the LGA reference table"""

    def __init__(self):
        """Initialize the data joiner"""
        super().__init__()
        self.join_misses = 0
        logger.info("Initialized DataJoiner")

    def join(self, listings: pd.DataFrame, reference: pd.DataFrame, key: str = 'lga') -> pd.DataFrame:
        """
        Attach reference columns to every listing

        Every listing row is kept exactly once and in its original order;
        listings without a matching area get null reference columns.

        Args:
            listings: Prepared listings DataFrame
            reference: Prepared reference DataFrame keyed by ``key``
            key: Join column present in both tables

        Returns:
            Joined DataFrame, indexed like ``listings``
        """
        duplicated = reference[key].duplicated(keep='first')
        if duplicated.any():
            logger.warning(f"Reference table has {int(duplicated.sum())} duplicate keys, keeping first occurrence")
            reference = reference[~duplicated]

        result_df = listings.merge(reference, on=key, how='left', validate='many_to_one')
        result_df.index = listings.index

        matched = listings[key].isin(reference[key])
        self.join_misses = int((~matched).sum())

        self.log_operation({
            'operation': 'left_join',
            'key': key,
            'rows': len(result_df),
            'matched': int(matched.sum()),
            'unmatched': self.join_misses,
            'unmatched_keys': sorted(listings.loc[~matched, key].dropna().astype(str).unique().tolist())
        })
        if self.join_misses:
            logger.warning(f"{self.join_misses} listings have no matching '{key}' in the reference table")
        logger.info(f"Joined listings with reference table on '{key}': {len(result_df)} rows")

        return result_df
