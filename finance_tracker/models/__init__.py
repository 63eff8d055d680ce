"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.flash import FlashMessage, FlashType
from finance_tracker.models.report import (
    CalendarDay,
    CategoryRow,
    DashboardView,
    DayBucket,
    MonthReport,
    MonthSummary,
)
from finance_tracker.models.settings import TrackerSettings
from finance_tracker.models.transaction import (
    DEFAULT_CATEGORY,
    Transaction,
    TransactionType,
    new_transaction_id,
)

__all__ = [
    # Transaction models
    "DEFAULT_CATEGORY",
    "Transaction",
    "TransactionType",
    "new_transaction_id",
    # Settings
    "TrackerSettings",
    # Report models
    "CalendarDay",
    "CategoryRow",
    "DashboardView",
    "DayBucket",
    "MonthReport",
    "MonthSummary",
    # Flash messages
    "FlashMessage",
    "FlashType",
]
