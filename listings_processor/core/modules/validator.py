# listings_processor/core/modules/validator.py
"""Data validation module for structural checks and listing consistency rules"""

import pandas as pd
from typing import Callable, Dict, List, Tuple

from listings_processor.core.modules.base import BaseModule
from listings_processor.core.modules.transformer import categorical_to_numeric
from listings_processor.utils.exceptions import FatalInputError
from listings_processor.utils.logging_utils import get_logger

logger = get_logger("DataValidator")

Rule = Callable[[pd.DataFrame], pd.Series]


def build_validity_rules(min_price: float = 5.0) -> Dict[str, Rule]:
    """
    Ordered validity predicates of a listing

    Each rule returns True for records that satisfy it.
    """
    return {
        'price_minimum': lambda df: df['price'] >= min_price,
        'price_per_guest_non_negative': lambda df: df['price_per_guest'] >= 0,
        'number_of_reviews_non_negative': lambda df: df['number_of_reviews'] >= 0,
        'lga_area_non_negative': lambda df: df['lga_area_km2'] >= 0,
        'lga_density_non_negative': lambda df: df['lga_density'] >= 0,
        'lga_population_non_negative': lambda df: df['lga_population'] >= 0,
    }


VALIDITY_RULES = build_validity_rules()


class DataValidator(BaseModule):
    """Data validation module for structural checks and listing consistency rules"""

    def __init__(self):
        """Initialize the data validator"""
        super().__init__()
        self.validation_results = {
            'completeness': {},
            'business_rules': {}
        }
        self.violation_masks = {}
        logger.info("Initialized DataValidator")

    def check_required_fields(self, df: pd.DataFrame, required_fields: List[str]) -> Tuple[bool, Dict]:
        """
        Check that required fields exist and the table has rows

        Args:
            df: Input DataFrame
            required_fields: List of required fields

        Returns:
            Tuple of (passed validation?, detailed results)
        """
        result = {
            'missing_fields': [field for field in required_fields if field not in df.columns],
            'rows': len(df)
        }
        passed = len(result['missing_fields']) == 0 and result['rows'] > 0
        result['passed'] = passed

        self.validation_results['completeness']['required_fields'] = result
        self.log_operation({
            'operation': 'check_required_fields',
            'required_fields': required_fields,
            'result': result,
            'passed': passed
        })

        if passed:
            logger.info("Required fields validation passed")
        else:
            logger.warning(f"Required fields validation failed: {result}")

        return passed, result

    def check_foreign_key_integrity(self, df: pd.DataFrame, fk_col: str,
                                    reference_df: pd.DataFrame, reference_col: str) -> Tuple[bool, Dict]:
        """
        Check foreign key integrity

        Args:
            df: Input DataFrame (containing foreign key)
            fk_col: Foreign key column name
            reference_df: Reference DataFrame (containing primary key)
            reference_col: Primary key column name in reference table

        Returns:
            Tuple of (passed validation?, detailed results)
        """
        reference_values = set(reference_df[reference_col].dropna().unique())
        fk_values = set(df[fk_col].dropna().unique())
        invalid_values = sorted(str(value) for value in fk_values - reference_values)
        invalid_rows = int((~df[fk_col].isin(reference_values)).sum())

        result = {
            'invalid_values': invalid_values,
            'invalid_rows': invalid_rows,
        }
        passed = invalid_rows == 0
        result['passed'] = passed

        self.validation_results['completeness']['foreign_key'] = result
        self.log_operation({
            'operation': 'check_foreign_key_integrity',
            'fk_col': fk_col,
            'reference_col': reference_col,
            'result': result,
            'passed': passed
        })

        if passed:
            logger.info(f"Foreign key integrity validation passed for '{fk_col}'")
        else:
            logger.warning(f"Foreign key integrity validation failed: {invalid_rows} rows reference "
                           f"{len(invalid_values)} unknown values")

        return passed, result

    def check_domain_rules(self, df: pd.DataFrame, rule_specs: Dict[str, Rule]) -> Tuple[bool, Dict]:
        """
        Check domain-specific rules

        Args:
            df: Input DataFrame
            rule_specs: Mapping from rule names to rule functions, each returning a boolean Series

        Returns:
            Tuple of (passed validation?, detailed results); the violation mask of
            every rule that could be evaluated is kept in ``violation_masks``
        """
        result = {'rule_violations': {}}
        self.violation_masks = {}

        for rule_name, rule_func in rule_specs.items():
            try:
                violations = ~rule_func(df)
            except (KeyError, TypeError) as e:
                result['rule_violations'][rule_name] = {'error': str(e)}
                logger.error(f"Error applying rule '{rule_name}': {e}")
                continue

            self.violation_masks[rule_name] = violations

            violation_count = int(violations.sum())
            if violation_count > 0:
                result['rule_violations'][rule_name] = {
                    'count': violation_count,
                    'first_few_indices': df[violations].index[:5].tolist()
                }

        passed = len(result['rule_violations']) == 0
        result['passed'] = passed

        self.validation_results['business_rules']['domain_rules'] = result
        self.log_operation({
            'operation': 'check_domain_rules',
            'rules': list(rule_specs.keys()),
            'result': result,
            'passed': passed
        })

        if passed:
            logger.info("Domain rules validation passed")
        else:
            logger.warning(f"Domain rules validation failed: found {len(result['rule_violations'])} rule violations")

        return passed, result

    def enforce_rules(self, df: pd.DataFrame, rule_specs: Dict[str, Rule] = None) -> pd.DataFrame:
        """
        Remove every record that violates at least one rule

        All rules are evaluated on the same frame and the flagged records are
        removed together, so no rule sees the effect of another.

        Args:
            df: Input DataFrame
            rule_specs: Mapping from rule names to rule functions, defaults to VALIDITY_RULES

        Returns:
            DataFrame of records satisfying every rule

        Raises:
            FatalInputError: If a rule cannot be evaluated on ``df``
        """
        rule_specs = rule_specs or VALIDITY_RULES
        self.check_domain_rules(df, rule_specs)

        failed_rules = [name for name in rule_specs if name not in self.violation_masks]
        if failed_rules:
            raise FatalInputError(f"Validity rules could not be evaluated: {failed_rules}")

        flagged = pd.Series(False, index=df.index)
        for violations in self.violation_masks.values():
            flagged |= violations

        result_df = df[~flagged].copy()
        removed = self._removed_count(df, result_df)
        self.log_operation({
            'operation': 'enforce_rules',
            'rules': list(rule_specs.keys()),
            'removed_count': removed
        })
        logger.info(f"Removed records violating validity rules: {removed} rows")
        return result_df

    def clamp_guests_to_accommodates(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Cap ``guests_included`` at ``accommodates``

        Records with more included guests than the listing accommodates are
        corrected in place rather than removed; ``accommodates`` is unchanged.
        """
        result_df = df.copy()
        guests = categorical_to_numeric(df['guests_included'])
        accommodates = categorical_to_numeric(df['accommodates'])
        violations = guests > accommodates

        levels = list(df['guests_included'].cat.categories)
        extra = sorted(set(accommodates[violations]) - set(levels))
        if extra:
            levels = sorted(levels + extra)

        clamped = guests.where(~violations, accommodates)
        result_df['guests_included'] = pd.Categorical(clamped, categories=levels, ordered=True)

        count = int(violations.sum())
        self.validation_results['business_rules']['guests_within_accommodates'] = {
            'corrected': count,
            'passed': count == 0
        }
        self.log_operation({
            'operation': 'clamp_guests_included',
            'corrected_count': count
        })
        logger.info(f"Clamped guests_included to accommodates: {count} rows")
        return result_df

    def drop_price_ceiling(self, df: pd.DataFrame, ceiling: float = 5000.0) -> pd.DataFrame:
        """Remove listings priced above an implausible ceiling"""
        result_df = df[~(df['price'] > ceiling)].copy()
        removed = self._removed_count(df, result_df)
        self.log_operation({
            'operation': 'drop_price_ceiling',
            'ceiling': ceiling,
            'removed_count': removed
        })
        logger.info(f"Removed listings priced above {ceiling}: {removed} rows")
        return result_df

    def get_validation_summary(self) -> Dict:
        """
        Get validation results summary

        Returns:
            Dictionary containing pass counts per category and overall
        """
        summary = {category: {'total': 0, 'passed': 0} for category in self.validation_results.keys()}

        for category, checks in self.validation_results.items():
            for check_name, check_result in checks.items():
                summary[category]['total'] += 1
                if isinstance(check_result, dict) and check_result.get('passed', False):
                    summary[category]['passed'] += 1

        total_checks = sum(cat['total'] for cat in summary.values())
        passed_checks = sum(cat['passed'] for cat in summary.values())

        summary['overall'] = {
            'total': total_checks,
            'passed': passed_checks,
            'pass_rate': passed_checks / total_checks if total_checks > 0 else 1.0
        }

        return summary
