"""
Report Models

Plain records handed from the aggregation engine and flows to the UI.
They carry numbers and date keys only; formatting is left to the UI.
"""

from pydantic import BaseModel, Field

from finance_tracker.models.settings import TrackerSettings
from finance_tracker.models.transaction import Transaction, TransactionType


class MonthSummary(BaseModel):
    """Income/expense totals for a set of transactions."""

    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0


class DayBucket(BaseModel):
    """Running income and expense totals for one calendar day."""

    income: float = 0.0
    expense: float = 0.0


class CategoryRow(BaseModel):
    """Total for one (type, category) pair."""

    type: TransactionType
    category: str
    total: float = 0.0


class CalendarDay(BaseModel):
    """One day of a month calendar (zero-filled when nothing happened)."""

    date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="YYYY-MM-DD"
    )
    income: float = 0.0
    expense: float = 0.0


class DashboardView(BaseModel):
    """
    Everything the dashboard needs for the current month.

    suggest_daily_expense is what can still be spent per remaining day
    without passing the monthly expense target. daily_target_delta is
    positive when income so far is ahead of the cumulative daily target.
    """

    settings: TrackerSettings
    year_month: str
    summary: MonthSummary
    expense_left: float
    suggest_daily_expense: int
    daily_target_delta: float
    recent_transactions: list[Transaction] = Field(default_factory=list)


class MonthReport(BaseModel):
    """Monthly report: totals, category breakdown and day-by-day calendar."""

    settings: TrackerSettings
    year_month: str
    summary: MonthSummary
    categories: list[CategoryRow] = Field(default_factory=list)
    days: list[CalendarDay] = Field(default_factory=list)
