# listings_processor/core/modules/normalizer.py
"""Data normalization module: power transform and standardized-score outlier report"""

import pandas as pd
from typing import Dict, Tuple
from scipy import stats
from sklearn.preprocessing import PowerTransformer, StandardScaler

from listings_processor.core.modules.base import BaseModule
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("DataNormalizer")


class DataNormalizer(BaseModule):
    """Power transform and z-score thresholding of a skewed positive column"""

    def __init__(self, extreme_threshold: float = 3.0):
        """
        Initialize the data normalizer

        Args:
            extreme_threshold: Absolute z-score above which a record is flagged
        """
        super().__init__()
        self.extreme_threshold = extreme_threshold
        self.transformers = {}
        self.transform_report = {}
        logger.info(f"Initialized DataNormalizer: extreme_threshold={extreme_threshold}")

    def boxcox_transform(self, series: pd.Series) -> Tuple[pd.Series, float]:
        """
        Box-Cox transform with lambda chosen by maximum likelihood

        Args:
            series: Strictly positive values

        Returns:
            Tuple of (transformed series, fitted lambda)

        Raises:
            ValueError: If the series holds zero or negative values
        """
        if (series <= 0).any():
            raise ValueError(f"Box-Cox transform of '{series.name}' requires strictly positive values")

        transformer = PowerTransformer(method='box-cox', standardize=False)
        transformed = transformer.fit_transform(series.to_frame())
        self.transformers[series.name] = transformer

        lmbda = float(transformer.lambdas_[0])
        return pd.Series(transformed[:, 0], index=series.index, name=series.name), lmbda

    def z_scores(self, series: pd.Series) -> pd.Series:
        """Standardize a series to mean 0 and standard deviation 1"""
        scaler = StandardScaler()
        scaled = scaler.fit_transform(series.to_frame())
        return pd.Series(scaled[:, 0], index=series.index, name=series.name)

    def boxcox_zscore_outliers(self, df: pd.DataFrame, column: str = 'price_duplicate') -> Tuple[pd.DataFrame, Dict]:
        """
        Flag records whose Box-Cox transformed value is extreme

        Diagnostic only: ``df`` is neither filtered nor altered.

        Args:
            df: Input DataFrame
            column: Strictly positive column to transform

        Returns:
            Tuple of (flagged records, report dictionary)
        """
        series = df[column].astype(float)
        report = {
            'column': column,
            'threshold': self.extreme_threshold,
            'lambda': None,
            'flagged_count': 0,
            'skew_before': None,
            'skew_after': None
        }

        if series.nunique() < 2:
            logger.warning(f"Column '{column}' has fewer than two distinct values, skipping Box-Cox transform")
            self.transform_report = report
            return df.iloc[0:0].copy(), report

        transformed, lmbda = self.boxcox_transform(series)
        z = self.z_scores(transformed)
        flagged = z.abs() > self.extreme_threshold

        report.update({
            'lambda': lmbda,
            'flagged_count': int(flagged.sum()),
            'skew_before': float(stats.skew(series)),
            'skew_after': float(stats.skew(transformed))
        })
        self.transform_report = report

        self.log_operation({
            'operation': 'detect_outliers',
            'column': column,
            'method': 'boxcox_zscore',
            'lambda': lmbda,
            'threshold': self.extreme_threshold,
            'outlier_count': report['flagged_count']
        })
        logger.info(f"Applied Box-Cox transform to column '{column}' (lambda={lmbda:.4f}), "
                    f"skew {report['skew_before']:.3f} -> {report['skew_after']:.3f}")
        logger.info(f"Used Z-score to detect outliers in column '{column}': found {report['flagged_count']}")

        flagged_df = df[flagged].copy()
        flagged_df['z_score'] = z[flagged]
        return flagged_df, report
