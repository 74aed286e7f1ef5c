# listings_processor/core/modules/base.py
"""Base module for all pipeline stages"""

from datetime import datetime
from typing import Dict, List

import pandas as pd


class BaseModule:
    """Base class for all pipeline stages, keeps an audit trail of operations"""

    def __init__(self):
        """Initialize the base module"""
        self.operation_log = []

    def log_operation(self, operation_info: Dict) -> Dict:
        """
        Add timestamp and record an operation in the audit trail

        Args:
            operation_info: Dictionary containing operation details

        Returns:
            The operation info with added timestamp
        """
        operation_info['timestamp'] = datetime.now().isoformat()
        self.operation_log.append(operation_info)
        return operation_info

    def get_operations(self, operation: str) -> List[Dict]:
        """Return logged entries for a single operation name"""
        return [entry for entry in self.operation_log if entry.get('operation') == operation]

    @staticmethod
    def _removed_count(before: pd.DataFrame, after: pd.DataFrame) -> int:
        return int(len(before) - len(after))
