"""
Tests for the aggregation engine.

All functions under test are pure, so these are plain in-memory tests.
"""

import pytest
from datetime import date

from finance_tracker.models import (
    DayBucket,
    MonthSummary,
    TrackerSettings,
    Transaction,
    TransactionType,
)
from finance_tracker.reports import (
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


def tx(type_: str, amount: float, day: str, category: str = None) -> Transaction:
    return Transaction(date=day, type=type_, amount=amount, category=category)


@pytest.fixture
def may_scenario() -> list[Transaction]:
    return [
        tx("income", 1000, "2024-05-01"),
        tx("expense", 400, "2024-05-01"),
        tx("expense", 100, "2024-05-31"),
    ]


@pytest.fixture
def mixed_months() -> list[Transaction]:
    return [
        tx("income", 250, "2024-04-30", "Gaji"),
        tx("income", 1000, "2024-05-01", "Gaji"),
        tx("expense", 400, "2024-05-01", "Makan"),
        tx("expense", 75, "2024-05-14"),
        tx("expense", 60, "2024-05-14", "Makan"),
        tx("income", 300, "2024-05-20", "Bonus"),
        tx("expense", 100, "2024-05-31", "Transport"),
        tx("expense", 999, "2024-06-01", "Makan"),
    ]


class TestMonthWindow:
    """Tests for month parsing and filtering."""

    def test_parse_month(self):
        assert parse_month("2024-05") == (date(2024, 5, 1), date(2024, 5, 31))
        assert parse_month("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
        assert parse_month("2023-02") == (date(2023, 2, 1), date(2023, 2, 28))

    @pytest.mark.parametrize("bad", ["2024-13", "2024-00", "2024-5", "24-05", "May 2024", "", None, 202405])
    def test_parse_month_rejects_malformed(self, bad):
        with pytest.raises(InvalidMonthDesignator):
            parse_month(bad)

    def test_invalid_month_is_value_error(self):
        with pytest.raises(ValueError):
            filter_by_month([], "2024/05")

    def test_current_month(self):
        assert current_month(date(2024, 5, 10)) == "2024-05"
        assert current_month(date(2024, 12, 31)) == "2024-12"

    def test_days_in_month(self):
        assert days_in_month("2024-05") == 31
        assert days_in_month("2024-04") == 30
        assert days_in_month("2024-02") == 29

    def test_filter_includes_both_month_ends(self, mixed_months):
        """Test that the first and last calendar day are inside the window."""
        month = filter_by_month(mixed_months, "2024-05")
        days = {t.date for t in month}
        assert date(2024, 5, 1) in days
        assert date(2024, 5, 31) in days
        assert date(2024, 4, 30) not in days
        assert date(2024, 6, 1) not in days
        assert len(month) == 6

    def test_boundary_timestamps(self):
        """Test the last second of a month is in it and the next midnight is not."""
        last_second = tx("expense", 10, "2024-05-31T23:59:59")
        next_month = tx("expense", 20, "2024-06-01T00:00:00")

        month = filter_by_month([last_second, next_month], "2024-05")
        assert month == [last_second]

    def test_filter_preserves_order(self, mixed_months):
        month = filter_by_month(mixed_months, "2024-05")
        expected = [t for t in mixed_months if t.date.month == 5]
        assert [t.id for t in month] == [t.id for t in expected]

    def test_filter_is_idempotent(self, mixed_months):
        once = filter_by_month(mixed_months, "2024-05")
        twice = filter_by_month(once, "2024-05")
        assert twice == once


class TestSummaries:
    """Tests for totals and buckets."""

    def test_may_scenario_summary(self, may_scenario):
        summary = summarize(filter_by_month(may_scenario, "2024-05"))
        assert summary == MonthSummary(income=1000, expense=500, balance=500)

    def test_may_scenario_buckets(self, may_scenario):
        buckets = daily_buckets(filter_by_month(may_scenario, "2024-05"))
        assert buckets["2024-05-01"] == DayBucket(income=1000, expense=400)
        assert buckets["2024-05-31"] == DayBucket(income=0, expense=100)
        assert "2024-05-15" not in buckets

    def test_empty_summary(self):
        assert summarize([]) == MonthSummary(income=0, expense=0, balance=0)

    def test_balance_is_income_minus_expense(self, mixed_months):
        summary = summarize(filter_by_month(mixed_months, "2024-05"))
        assert summary.balance == summary.income - summary.expense
        assert summary.income == 1300
        assert summary.expense == 635

    def test_buckets_add_up_to_summary(self, mixed_months):
        """Test that daily buckets sum to the month totals."""
        month = filter_by_month(mixed_months, "2024-05")
        summary = summarize(month)
        buckets = daily_buckets(month)

        assert sum(b.income for b in buckets.values()) == summary.income
        assert sum(b.expense for b in buckets.values()) == summary.expense

    def test_same_day_amounts_accumulate(self, mixed_months):
        buckets = daily_buckets(filter_by_month(mixed_months, "2024-05"))
        assert buckets["2024-05-14"] == DayBucket(income=0, expense=135)


class TestCategoryBreakdown:
    """Tests for grouping by (type, category)."""

    def test_groups_by_type_and_category(self, mixed_months):
        rows = category_breakdown(filter_by_month(mixed_months, "2024-05"))
        totals = {(r.type, r.category): r.total for r in rows}

        assert totals == {
            (TransactionType.INCOME, "Gaji"): 1000,
            (TransactionType.EXPENSE, "Makan"): 460,
            (TransactionType.EXPENSE, "Umum"): 75,
            (TransactionType.INCOME, "Bonus"): 300,
            (TransactionType.EXPENSE, "Transport"): 100,
        }

    def test_first_seen_order(self, mixed_months):
        rows = category_breakdown(filter_by_month(mixed_months, "2024-05"))
        assert [r.category for r in rows] == ["Gaji", "Makan", "Umum", "Bonus", "Transport"]

    def test_same_category_different_types_are_separate_rows(self):
        rows = category_breakdown([
            tx("income", 10, "2024-05-01", "Lain"),
            tx("expense", 4, "2024-05-02", "Lain"),
        ])
        assert len(rows) == 2

    def test_empty(self):
        assert category_breakdown([]) == []


class TestMonthCalendar:
    """Tests for the zero-filled month calendar."""

    def test_every_day_in_order(self, may_scenario):
        buckets = daily_buckets(may_scenario)
        days = build_month_calendar("2024-05", buckets)

        assert len(days) == 31
        assert days[0].date == "2024-05-01"
        assert days[-1].date == "2024-05-31"
        assert [d.date for d in days] == sorted(d.date for d in days)
        assert (days[0].income, days[0].expense) == (1000, 400)
        assert (days[30].income, days[30].expense) == (0, 100)
        assert (days[14].income, days[14].expense) == (0, 0)

    def test_empty_month_is_zero_filled(self):
        days = build_month_calendar("2024-02", {})
        assert len(days) == 29
        assert all(d.income == 0 and d.expense == 0 for d in days)

    def test_ignores_buckets_outside_month(self):
        days = build_month_calendar("2024-05", {"2024-06-01": DayBucket(income=5)})
        assert sum(d.income for d in days) == 0


class TestSuggestions:
    """Tests for suggestions against the targets."""

    def test_suggest_daily_expense_scenario(self):
        settings = TrackerSettings(monthly_expense_target=3_000_000)
        summary = MonthSummary(expense=1_200_000)

        assert expense_left(settings, summary) == 1_800_000
        assert suggest_daily_expense(settings, summary, 31, 10) == 81818

    def test_over_budget_suggests_zero(self):
        settings = TrackerSettings(monthly_expense_target=1000)
        summary = MonthSummary(expense=5000)

        assert expense_left(settings, summary) == 0
        assert suggest_daily_expense(settings, summary, 30, 5) == 0

    def test_last_day_counts_as_remaining(self):
        settings = TrackerSettings(monthly_expense_target=1000)
        assert suggest_daily_expense(settings, MonthSummary(), 31, 31) == 1000

    def test_remaining_days_never_zero(self):
        settings = TrackerSettings(monthly_expense_target=1000)
        assert suggest_daily_expense(settings, MonthSummary(), 30, 31) == 1000

    def test_daily_target_delta_scenario(self):
        settings = TrackerSettings(daily_income_target=200_000)
        assert daily_target_delta(settings, 1_800_000, 10) == -200_000

    def test_daily_target_delta_ahead(self):
        settings = TrackerSettings(daily_income_target=100)
        assert daily_target_delta(settings, 1500, 10) == 500

    def test_income_up_to_includes_today(self, mixed_months):
        buckets = daily_buckets(filter_by_month(mixed_months, "2024-05"))
        assert income_up_to(buckets, date(2024, 5, 19)) == 1000
        assert income_up_to(buckets, date(2024, 5, 20)) == 1300
        assert income_up_to({}, date(2024, 5, 20)) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
