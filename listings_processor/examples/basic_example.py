# listings_processor/examples/basic_example.py
"""Basic usage example for the listings cleaning pipeline"""

import pandas as pd
import numpy as np
import argparse
from typing import List, Optional, Tuple

from listings_processor import ListingsProcessor
from listings_processor.utils import setup_logging

SAMPLE_AREAS = {
    'Melbourne': ('City of Melbourne', '37.7', '4,519'),
    'Yarra': ('City of Yarra', '19.5', '4,712'),
    'Port Phillip': ('City of Port Phillip', '20.6', '5,046'),
    'Yarra Ranges': ('Shire of Yarra Ranges', '2,468.0', '61'),
}
SAMPLE_SUBURBS = {
    'Melbourne': 'Melbourne',
    'Yarra': 'Fitzroy',
    'Port Phillip': 'St Kilda',
    'Yarra Ranges': 'Healesville',
}


def create_sample_data(rows: int = 500, seed: int = 42) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Create raw listings and reference tables with typical data quality problems"""
    rng = np.random.default_rng(seed)
    lgas = rng.choice(list(SAMPLE_AREAS.keys()), rows)
    accommodates = rng.integers(1, 9, rows)
    guests = np.minimum(accommodates, rng.integers(1, 5, rows))
    prices = np.round(rng.lognormal(mean=5.0, sigma=0.5, size=rows), 0)

    listings = pd.DataFrame({
        'id': [str(10000 + i) for i in range(rows)],
        'host_since': pd.date_range('2012-01-01', periods=rows, freq='7D').strftime('%Y-%m-%d'),
        'street': [f"{SAMPLE_SUBURBS[lga]}, VIC, Australia" for lga in lgas],
        'neighbourhood_cleansed': lgas,
        'property_type': rng.choice(['Apartment', 'House', 'Townhouse'], rows),
        'accommodates': accommodates.astype(str),
        'bathrooms': rng.choice(['1.0', '1.5', '2.0'], rows),
        'bedrooms': rng.integers(1, 4, rows).astype(str),
        'price': [f"${price:,.2f}" for price in prices],
        'guests_included': guests.astype(str),
        'number_of_reviews': rng.poisson(20, rows).astype(str),
        'instant_bookable': rng.choice(['t', 'f'], rows),
    })

    # Data quality problems
    listings.loc[0, 'price'] = '$2.00'
    listings.loc[1, ['accommodates', 'guests_included']] = ['4', '6']
    listings.loc[2, 'neighbourhood_cleansed'] = 'Unknown Shire'
    listings.loc[3, 'street'] = 'Melbourne, Australia'
    listings.loc[4, 'price'] = '$12,000.00'
    listings.loc[5, 'guests_included'] = '0'
    listings.loc[6, 'accommodates'] = '40'

    reference = pd.DataFrame(list(SAMPLE_AREAS.values()),
                             columns=['Local government area', 'Area (km2)', 'Density (/km2)'])
    return listings, reference


def main(argv: Optional[List[str]] = None) -> pd.DataFrame:
    """Run the pipeline on CSV inputs, or on generated sample data"""
    parser = argparse.ArgumentParser(description='Listings cleaning pipeline demo')
    parser.add_argument('--listings', type=str, default=None,
                        help='Path to the raw listings CSV')
    parser.add_argument('--reference', type=str, default=None,
                        help='Path to the LGA reference CSV')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to a JSON configuration file')
    parser.add_argument('--output', type=str, default=None,
                        help='Output CSV path')
    parser.add_argument('--log', type=str, default=None,
                        help='Log file path')
    parser.add_argument('--rows', type=int, default=500,
                        help='Number of sample rows to generate')
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log)

    if args.listings and args.reference:
        listings = pd.read_csv(args.listings, dtype=str)
        reference = pd.read_csv(args.reference, dtype=str)
    else:
        print("Creating sample data...")
        listings, reference = create_sample_data(rows=args.rows)
    print(f"Listings: {len(listings)} rows, reference: {len(reference)} areas")

    if args.config:
        processor = ListingsProcessor.from_config_file(args.config)
    else:
        processor = ListingsProcessor()

    cleaned = processor.process(listings, reference)

    summary = processor.get_processing_summary()
    print("\nProcessing Summary:")
    print(f"- Input shape: {summary['input_shape']}")
    print(f"- Output shape: {summary['output_shape']}")
    for step in summary['processing_steps']:
        print(f"- {step['step']}: {step['rows']} rows")
    for col, stats in summary['outliers'].items():
        print(f"- {col}: {stats['outlier_count']} fenced outliers "
              f"({stats['outlier_fraction'] * 100:.1f}%) replaced")
    print(f"- Box-Cox lambda: {summary['transform'].get('lambda')}, "
          f"z-score outliers: {summary['anomalies_count']}")

    if args.output:
        cleaned.to_csv(args.output, index=False)
        print(f"\nSaved cleaned data to {args.output}")

    return cleaned


if __name__ == "__main__":
    main()
