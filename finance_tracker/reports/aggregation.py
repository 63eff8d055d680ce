"""
Aggregation Engine

DESIGN DECISION: Every function here is PURE.
Flows load transactions and settings from storage, then call these
functions on in-memory lists. Nothing here performs I/O, so the same
numbers come out whichever storage backend is in use.

Month windows are closed intervals [first day, last day]. Transactions are
compared by calendar day, so anything dated on the last day of a month
(up to 23:59:59) belongs to that month and the first day of the next month
does not.
"""

import calendar
import datetime as dt
import math
import re
from collections.abc import Iterable, Mapping

from finance_tracker.models.report import (
    CalendarDay,
    CategoryRow,
    DayBucket,
    MonthSummary,
)
from finance_tracker.models.settings import TrackerSettings
from finance_tracker.models.transaction import (
    DEFAULT_CATEGORY,
    Transaction,
    TransactionType,
)


_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


class InvalidMonthDesignator(ValueError):
    """A month key that cannot be turned into a calendar range."""

    def __init__(self, year_month: object):
        self.year_month = year_month
        super().__init__(f"Invalid month designator: {year_month!r} (expected YYYY-MM)")


# =============================================================================
# MONTH WINDOWS
# =============================================================================

def parse_month(year_month: str) -> tuple[dt.date, dt.date]:
    """
    Parse 'YYYY-MM' into its inclusive (first_day, last_day) range.

    Raises:
        InvalidMonthDesignator: If the key is malformed or the month is out of range
    """
    match = _MONTH_RE.match(year_month.strip()) if isinstance(year_month, str) else None
    if not match:
        raise InvalidMonthDesignator(year_month)

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise InvalidMonthDesignator(year_month)

    last = calendar.monthrange(year, month)[1]
    return dt.date(year, month, 1), dt.date(year, month, last)


def current_month(today: dt.date) -> str:
    """The YYYY-MM key of a date."""
    return today.strftime("%Y-%m")


def days_in_month(year_month: str) -> int:
    _, last = parse_month(year_month)
    return last.day


def filter_by_month(
    transactions: Iterable[Transaction],
    year_month: str,
) -> list[Transaction]:
    """Transactions dated within the month, in their original order."""
    first, last = parse_month(year_month)
    return [t for t in transactions if first <= t.date <= last]


# =============================================================================
# TOTALS AND BUCKETS
# =============================================================================

def summarize(transactions: Iterable[Transaction]) -> MonthSummary:
    """Income, expense and balance totals. Empty input gives zeros."""
    income = 0.0
    expense = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expense += t.amount
    return MonthSummary(income=income, expense=expense, balance=income - expense)


def daily_buckets(transactions: Iterable[Transaction]) -> dict[str, DayBucket]:
    """
    Group amounts by calendar day (keyed YYYY-MM-DD).

    Days without transactions are absent; callers needing a full month
    should use build_month_calendar.
    """
    buckets: dict[str, DayBucket] = {}
    for t in transactions:
        bucket = buckets.setdefault(t.day_key, DayBucket())
        if t.type == TransactionType.INCOME:
            bucket.income += t.amount
        else:
            bucket.expense += t.amount
    return buckets


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryRow]:
    """One row per (type, category) pair, in first-seen order."""
    totals: dict[tuple[TransactionType, str], float] = {}
    for t in transactions:
        key = (t.type, t.category or DEFAULT_CATEGORY)
        totals[key] = totals.get(key, 0.0) + t.amount

    return [
        CategoryRow(type=tx_type, category=category, total=total)
        for (tx_type, category), total in totals.items()
    ]


def income_up_to(buckets: Mapping[str, DayBucket], day: dt.date) -> float:
    """Cumulative income over buckets dated on or before `day`."""
    cutoff = day.isoformat()
    # ISO date keys sort lexicographically in date order
    return sum(b.income for key, b in buckets.items() if key <= cutoff)


def build_month_calendar(
    year_month: str,
    buckets: Mapping[str, DayBucket],
) -> list[CalendarDay]:
    """Every day of the month in ascending order, zero-filled."""
    first, last = parse_month(year_month)

    days = []
    for offset in range(last.day):
        key = (first + dt.timedelta(days=offset)).isoformat()
        bucket = buckets.get(key) or DayBucket()
        days.append(CalendarDay(date=key, income=bucket.income, expense=bucket.expense))
    return days


# =============================================================================
# SUGGESTIONS AGAINST TARGETS
# =============================================================================

def expense_left(settings: TrackerSettings, month_summary: MonthSummary) -> float:
    """Budget remaining under the monthly expense target (never negative)."""
    return max(settings.monthly_expense_target - month_summary.expense, 0)


def suggest_daily_expense(
    settings: TrackerSettings,
    month_summary: MonthSummary,
    days_in_month: int,
    day_of_month: int,
) -> int:
    """
    How much can be spent per remaining day, today included.

    remaining days is clamped to at least 1.
    """
    remaining_days = max(days_in_month - day_of_month + 1, 1)
    return math.floor(expense_left(settings, month_summary) / remaining_days)


def daily_target_delta(
    settings: TrackerSettings,
    cumulative_income: float,
    day_of_month: int,
) -> float:
    """Income so far minus the daily income target times days elapsed."""
    return cumulative_income - settings.daily_income_target * day_of_month
