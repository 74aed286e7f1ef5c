"""
Tests for the Box-Cox / z-score outlier report
"""

import numpy as np
import pandas as pd
import pytest

from listings_processor.core.modules.normalizer import DataNormalizer


@pytest.fixture
def skewed_prices():
    rng = np.random.default_rng(0)
    values = np.append(rng.lognormal(mean=5.0, sigma=0.5, size=300), 20000.0)
    return pd.DataFrame({'price_duplicate': values, 'price': values})


class TestBoxCoxZScore:

    def test_extreme_price_is_flagged(self, skewed_prices):
        flagged, report = DataNormalizer().boxcox_zscore_outliers(skewed_prices)

        assert 300 in flagged.index
        assert report['flagged_count'] == len(flagged)
        assert isinstance(report['lambda'], float)
        assert (flagged['z_score'].abs() > 3.0).all()

    def test_transform_reduces_skew(self, skewed_prices):
        _, report = DataNormalizer().boxcox_zscore_outliers(skewed_prices)

        assert abs(report['skew_after']) < abs(report['skew_before'])

    def test_report_does_not_mutate_frame(self, skewed_prices):
        original = skewed_prices.copy()

        DataNormalizer().boxcox_zscore_outliers(skewed_prices)

        pd.testing.assert_frame_equal(skewed_prices, original)

    def test_z_scores_are_standardized(self, skewed_prices):
        normalizer = DataNormalizer()
        transformed, _ = normalizer.boxcox_transform(skewed_prices['price_duplicate'])

        z = normalizer.z_scores(transformed)

        assert z.mean() == pytest.approx(0.0, abs=1e-9)
        assert z.std(ddof=0) == pytest.approx(1.0)

    def test_non_positive_values_rejected(self):
        df = pd.DataFrame({'price_duplicate': [0.0, 10.0, 20.0]})

        with pytest.raises(ValueError, match="strictly positive"):
            DataNormalizer().boxcox_zscore_outliers(df)

    def test_constant_column_is_skipped(self):
        df = pd.DataFrame({'price_duplicate': [100.0, 100.0, 100.0]})

        flagged, report = DataNormalizer().boxcox_zscore_outliers(df)

        assert flagged.empty
        assert report['lambda'] is None
        assert report['flagged_count'] == 0
