"""Transaction aggregation and reporting package."""

from finance_tracker.reports.aggregation import (
    InvalidMonthDesignator,
    build_month_calendar,
    category_breakdown,
    current_month,
    daily_buckets,
    daily_target_delta,
    days_in_month,
    expense_left,
    filter_by_month,
    income_up_to,
    parse_month,
    suggest_daily_expense,
    summarize,
)

__all__ = [
    "InvalidMonthDesignator",
    "build_month_calendar",
    "category_breakdown",
    "current_month",
    "daily_buckets",
    "daily_target_delta",
    "days_in_month",
    "expense_left",
    "filter_by_month",
    "income_up_to",
    "parse_month",
    "suggest_daily_expense",
    "summarize",
]
