"""
Error taxonomy shared by the record stores, the data service and the API.
"""

from typing import Optional


class BudgetTrackerError(Exception):
    """Base class for all application errors."""


class ValidationError(BudgetTrackerError):
    """Input was rejected before reaching the record store."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class PersistenceError(BudgetTrackerError):
    """The backing store was unreachable or rejected a read/write."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
