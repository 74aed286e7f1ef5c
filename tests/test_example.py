"""
Smoke tests for the example runner
"""

import pandas as pd

from listings_processor.core.settings import OUTPUT_COLUMNS
from listings_processor.examples.basic_example import create_sample_data, main


class TestBasicExample:

    def test_sample_data_has_raw_columns(self):
        listings, reference = create_sample_data(rows=50)

        assert len(listings) == 50
        assert listings.loc[0, 'price'] == '$2.00'
        assert reference['Local government area'].str.contains('of ').all()

    def test_main_on_sample_data(self, tmp_path):
        output = tmp_path / 'cleaned.csv'

        cleaned = main(['--rows', '200', '--output', str(output)])

        assert list(cleaned.columns) == OUTPUT_COLUMNS
        assert 0 < len(cleaned) < 200
        assert output.exists()
        assert len(pd.read_csv(output)) == len(cleaned)

    def test_main_on_csv_inputs(self, tmp_path):
        listings, reference = create_sample_data(rows=100, seed=7)
        listings_path = tmp_path / 'listings.csv'
        reference_path = tmp_path / 'reference.csv'
        listings.to_csv(listings_path, index=False)
        reference.to_csv(reference_path, index=False)

        cleaned = main(['--listings', str(listings_path), '--reference', str(reference_path)])

        assert '10000' not in set(cleaned['id'].astype(str))
