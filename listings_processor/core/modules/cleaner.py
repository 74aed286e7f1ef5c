# listings_processor/core/modules/cleaner.py
"""Data cleaning module for missing/special values and fence-based outliers"""

import pandas as pd
import numpy as np
from typing import Dict, List, Tuple

from listings_processor.core.modules.base import BaseModule
from listings_processor.utils.exceptions import ConfigurationError
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("DataCleaner")

OUTLIER_STRATEGIES = ('median', 'winsorize', 'remove')


class DataCleaner(BaseModule):
    """Data cleaning module for missing/special values and outliers"""

    def __init__(self, fence_multiplier: float = 1.5, outlier_strategy: str = 'median'):
        """
        Initialize the data cleaner

        Args:
            fence_multiplier: IQR multiplier of the Tukey fences
            outlier_strategy: Strategy for fenced outliers: 'median', 'winsorize', 'remove'
        """
        super().__init__()
        if outlier_strategy not in OUTLIER_STRATEGIES:
            raise ConfigurationError(f"Unknown outlier strategy '{outlier_strategy}', "
                                     f"expected one of {OUTLIER_STRATEGIES}")
        self.fence_multiplier = fence_multiplier
        self.outlier_strategy = outlier_strategy
        self.missing_report = None
        self.outlier_report = {}
        logger.info(
            f"Initialized DataCleaner: fence_multiplier={fence_multiplier}, outlier_strategy={outlier_strategy}")

    @staticmethod
    def _special_mask(df: pd.DataFrame) -> pd.DataFrame:
        """Cell-wise mask of null, NaN and infinite values"""
        mask = df.isnull()
        numeric_cols = df.select_dtypes(include=np.number).columns
        if len(numeric_cols) > 0:
            mask[numeric_cols] |= np.isinf(df[numeric_cols].astype(float))
        return mask

    def count_missing(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Count null and infinite values per column

        Args:
            df: Input DataFrame

        Returns:
            DataFrame indexed by column with 'nulls' and 'infinite' counts
        """
        nulls = df.isnull().sum()
        infinite = pd.Series(0, index=df.columns)
        numeric_cols = df.select_dtypes(include=np.number).columns
        if len(numeric_cols) > 0:
            infinite[numeric_cols] = np.isinf(df[numeric_cols].astype(float)).sum()

        report = pd.DataFrame({'nulls': nulls.astype(int), 'infinite': infinite.astype(int)})
        self.missing_report = report
        logger.info(f"Missing value stats:\n{report[report.sum(axis=1) > 0]}")
        return report

    def drop_missing_records(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Remove every record holding a null, NaN or infinite value in any column

        No column-wise imputation happens here; affected rows are dropped whole.

        Args:
            df: Input DataFrame

        Returns:
            DataFrame without incomplete records
        """
        self.count_missing(df)
        affected = self._special_mask(df).any(axis=1)
        result_df = df[~affected].copy()

        dropped_rows = self._removed_count(df, result_df)
        self.log_operation({
            'operation': 'drop_rows',
            'count': dropped_rows,
            'fraction': dropped_rows / len(df) if len(df) else 0.0,
            'reason': 'missing_or_special_values'
        })
        logger.info(f"Dropped rows with missing or special values: {dropped_rows} rows")
        return result_df

    def detect_outliers_iqr(self, series: pd.Series) -> Tuple[float, float, pd.Series]:
        """
        Tukey fences of a numeric column

        Args:
            series: Numeric values

        Returns:
            Tuple of (lower bound, upper bound, mask of values strictly outside)
        """
        q1 = series.quantile(0.25)
        q3 = series.quantile(0.75)
        iqr = q3 - q1
        lower_bound = q1 - self.fence_multiplier * iqr
        upper_bound = q3 + self.fence_multiplier * iqr
        mask = (series < lower_bound) | (series > upper_bound)
        return lower_bound, upper_bound, mask

    def snapshot_column(self, df: pd.DataFrame, source: str, target: str) -> pd.DataFrame:
        """Store a frozen copy of ``source`` as ``target`` before it is overwritten"""
        result_df = df.copy()
        result_df[target] = df[source].copy()
        self.log_operation({
            'operation': 'snapshot_column',
            'source': source,
            'target': target
        })
        logger.info(f"Saved copy of column '{source}' as '{target}'")
        return result_df

    def impute_outliers(self, df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
        """
        Detect fenced outliers per column and treat them with the configured strategy

        Fences and medians of every column are taken from ``df`` as passed in,
        so the order of ``columns`` does not change the result.

        Args:
            df: Input DataFrame
            columns: Numeric columns to treat independently

        Returns:
            DataFrame with outliers replaced (or removed)
        """
        result_df = df.copy()
        outlier_rows = pd.Series(False, index=df.index)

        for col in columns:
            if col not in df.columns:
                logger.warning(f"Outlier column '{col}' not found, skipping")
                continue

            lower_bound, upper_bound, mask = self.detect_outliers_iqr(df[col])
            median = df[col].median()
            outlier_count = int(mask.sum())

            if self.outlier_strategy == 'median':
                result_df.loc[mask, col] = median
            elif self.outlier_strategy == 'winsorize':
                result_df[col] = df[col].clip(lower=lower_bound, upper=upper_bound)
            else:
                outlier_rows |= mask

            self.outlier_report[col] = {
                'q1': float(df[col].quantile(0.25)),
                'q3': float(df[col].quantile(0.75)),
                'iqr': float(df[col].quantile(0.75) - df[col].quantile(0.25)),
                'lower_bound': float(lower_bound),
                'upper_bound': float(upper_bound),
                'median': float(median),
                'outlier_count': outlier_count,
                'outlier_fraction': outlier_count / len(df) if len(df) else 0.0
            }
            self.log_operation({
                'operation': 'handle_outliers',
                'column': col,
                'method': self.outlier_strategy,
                'lower_bound': lower_bound,
                'upper_bound': upper_bound,
                'outlier_count': outlier_count
            })
            logger.info(f"Used IQR to detect outliers in column '{col}': found {outlier_count} "
                        f"outside [{lower_bound:.2f}, {upper_bound:.2f}], handled with {self.outlier_strategy}")

        if self.outlier_strategy == 'remove':
            result_df = result_df[~outlier_rows]
            logger.info(f"Removed outlier rows: {int(outlier_rows.sum())} rows")

        return result_df

    def get_outlier_summary(self) -> Dict:
        return dict(self.outlier_report)
