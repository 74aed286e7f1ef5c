# listings_processor/core/processor.py
"""Listings processor, running join, coercion, cleaning, rule checks and outlier treatment in order"""

import pandas as pd
from typing import Dict, Optional
import json

from listings_processor.core.modules.cleaner import DataCleaner
from listings_processor.core.modules.joiner import DataJoiner, prepare_listings, prepare_reference
from listings_processor.core.modules.normalizer import DataNormalizer
from listings_processor.core.modules.transformer import DataTransformer
from listings_processor.core.modules.validator import DataValidator, build_validity_rules
from listings_processor.core.settings import DEFAULT_CONFIG, OUTPUT_COLUMNS, merge_config
from listings_processor.utils.exceptions import ConfigurationError
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("ListingsProcessor")


class ListingsProcessor:
    """
    Cleaning pipeline for a listings snapshot and its LGA reference table

    Stages run strictly in sequence, each taking the whole DataFrame and
    returning a new one:

    1. prepare inputs and left-join the reference table
    2. coerce raw text columns to typed columns
    3. derive price per guest, LGA population and location parts
    4. drop records with null, NaN or infinite values
    5. drop rule violations, clamp guests to accommodates, drop implausible prices
    6. keep a copy of price, then replace fenced outliers with the median
    7. report Box-Cox/z-score outliers of the copied price (no mutation)
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize the listings processor

        Args:
            config: Partial configuration, merged over DEFAULT_CONFIG
        """
        self.config = merge_config(DEFAULT_CONFIG, config or {})

        coercion = self.config['coercion']
        outliers = self.config['outliers']
        self.joiner = DataJoiner()
        self.transformer = DataTransformer(ordered_levels=coercion['ordered_levels'],
                                           date_format=coercion['date_format'])
        self.validator = DataValidator()
        self.cleaner = DataCleaner(fence_multiplier=outliers['multiplier'],
                                   outlier_strategy=outliers['strategy'])
        self.normalizer = DataNormalizer(extreme_threshold=self.config['transform']['threshold'])

        self.processed_data = None
        self.anomalies = None
        self.processing_steps = []
        self.input_stats = None
        logger.info("Initialized ListingsProcessor")

    def _record_step(self, step: str, df: pd.DataFrame, **details) -> None:
        entry = {'step': step, 'rows': len(df)}
        entry.update(details)
        self.processing_steps.append(entry)

    def process(self, listings: pd.DataFrame, reference: pd.DataFrame) -> pd.DataFrame:
        """
        Run the full cleaning pipeline

        Args:
            listings: Raw listings table (text columns)
            reference: Raw LGA reference table

        Returns:
            Cleaned, analysis-ready DataFrame

        Raises:
            FatalInputError: If an input is empty or lacks a required column
        """
        input_cfg = self.config['input']
        coercion = self.config['coercion']
        rules = self.config['rules']
        self.processing_steps = []

        ref_cols = input_cfg['reference_columns']
        listings_df = prepare_listings(listings, input_cfg['listing_columns'])
        reference_df = prepare_reference(reference, ref_cols['name'], ref_cols['area'], ref_cols['density'])

        self.input_stats = {
            'rows': len(listings_df),
            'columns': len(listings_df.columns),
            'reference_rows': len(reference_df),
            'missing_values': int(listings_df.isnull().sum().sum())
        }
        logger.info(f"Starting listings processing: {self.input_stats['rows']} rows, "
                    f"{self.input_stats['reference_rows']} reference areas")

        # 1. Join
        self.validator.check_foreign_key_integrity(listings_df, 'lga', reference_df, 'lga')
        result_df = self.joiner.join(listings_df, reference_df, key='lga')
        self._record_step('join', result_df, unmatched=self.joiner.join_misses)

        # 2-3. Coercion and derived attributes
        result_df = self.transformer.coerce_types(result_df)
        self._record_step('coerce_types', result_df,
                          failures=sum(self.transformer.coercion_failures.values()))
        result_df = self.transformer.derive_attributes(result_df, delimiter=coercion['location_delimiter'])
        self._record_step('derive_attributes', result_df)

        # 4. Missing and special values
        result_df = self.cleaner.drop_missing_records(result_df)
        self._record_step('drop_missing_records', result_df)

        # 5. Consistency rules
        result_df = self.validator.enforce_rules(result_df, build_validity_rules(rules['min_price']))
        self._record_step('enforce_rules', result_df)
        result_df = self.validator.clamp_guests_to_accommodates(result_df)
        self._record_step('clamp_guests_included', result_df)
        result_df = self.validator.drop_price_ceiling(result_df, ceiling=rules['price_ceiling'])
        self._record_step('drop_price_ceiling', result_df)

        # 6. Fenced outliers
        result_df = self.cleaner.snapshot_column(result_df, 'price', 'price_duplicate')
        result_df = self.cleaner.impute_outliers(result_df, self.config['outliers']['columns'])
        self._record_step('impute_outliers', result_df, strategy=self.cleaner.outlier_strategy)

        # 7. Box-Cox / z-score report
        self.anomalies, _ = self.normalizer.boxcox_zscore_outliers(
            result_df, column=self.config['transform']['column'])
        self._record_step('boxcox_zscore_report', result_df, flagged=len(self.anomalies))

        result_df = result_df[[col for col in OUTPUT_COLUMNS if col in result_df.columns]]
        self.validator.check_required_fields(result_df, OUTPUT_COLUMNS)

        self.processed_data = result_df
        logger.info(f"Listings processing completed: {len(result_df)} rows, {len(result_df.columns)} columns")
        return result_df

    def get_processing_summary(self) -> Dict:
        """
        Get processing summary

        Returns:
            Processing summary dictionary
        """
        summary = {
            'processing_steps': self.processing_steps,
            'validation_summary': self.validator.get_validation_summary(),
            'missing_values': self.cleaner.missing_report,
            'coercion_failures': dict(self.transformer.coercion_failures),
            'outliers': self.cleaner.get_outlier_summary(),
            'transform': dict(self.normalizer.transform_report),
            'input_shape': None,
            'output_shape': None,
            'anomalies_count': 0
        }

        if self.input_stats:
            summary['input_shape'] = (self.input_stats['rows'], self.input_stats['columns'])

        if self.processed_data is not None:
            summary['output_shape'] = self.processed_data.shape

        if self.anomalies is not None:
            summary['anomalies_count'] = len(self.anomalies)

        return summary

    @staticmethod
    def load_config(config_path: str) -> Dict:
        """
        Load a partial configuration from a JSON file

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration: {e}")
            raise ConfigurationError(f"Cannot load configuration from {config_path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration in {config_path} must be a JSON object")

        logger.info(f"Loaded configuration from {config_path}")
        return config

    def save_config(self, config_path: str) -> None:
        """
        Save the effective configuration to a JSON file

        Args:
            config_path: Path to save configuration
        """
        try:
            with open(config_path, 'w') as f:
                json.dump(self.config, f, indent=4)
        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            raise ConfigurationError(f"Cannot save configuration to {config_path}: {e}") from e
        logger.info(f"Saved configuration to {config_path}")

    @classmethod
    def from_config_file(cls, config_path: str) -> 'ListingsProcessor':
        return cls(config=cls.load_config(config_path))
