"""
Database models package.
"""

from budget_tracker.models.local_entry import LocalEntry

__all__ = [
    "LocalEntry",
]
