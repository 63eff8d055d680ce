"""
Tests for Finance Tracker models

Test strategy:
1. Unit tests for models (transaction, settings, flash messages)
2. Aggregation and storage tests live in their own modules
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date

from finance_tracker.flash import FLASH_KEY, consume_flash, set_flash
from finance_tracker.models import (
    DEFAULT_CATEGORY,
    FlashMessage,
    FlashType,
    TrackerSettings,
    Transaction,
    TransactionType,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction creation with all fields."""
        tx = Transaction(
            date=date(2024, 5, 1),
            type=TransactionType.INCOME,
            category="Gaji",
            note="May salary",
            amount=1000,
        )
        assert tx.type == TransactionType.INCOME
        assert tx.amount == 1000
        assert tx.category == "Gaji"
        assert tx.id

    def test_ids_are_unique(self):
        """Test that each new transaction gets its own id."""
        a = Transaction(date=date(2024, 5, 1), type="income", amount=1)
        b = Transaction(date=date(2024, 5, 1), type="income", amount=1)
        assert a.id != b.id

    def test_category_defaults_to_umum(self):
        """Test missing, empty and blank categories become the sentinel."""
        assert Transaction(date="2024-05-01", type="expense").category == DEFAULT_CATEGORY
        assert Transaction(date="2024-05-01", type="expense", category="").category == "Umum"
        assert Transaction(date="2024-05-01", type="expense", category="   ").category == "Umum"
        assert Transaction(date="2024-05-01", type="expense", category=None).category == "Umum"

    def test_note_defaults_to_empty(self):
        tx = Transaction(date="2024-05-01", type="expense", note=None)
        assert tx.note == ""

    def test_rejects_unknown_type(self):
        """Test that type is a closed set."""
        with pytest.raises(ValueError):
            Transaction(date="2024-05-01", type="transfer", amount=10)

    def test_rejects_malformed_date(self):
        with pytest.raises(ValueError):
            Transaction(date="not-a-date", type="income", amount=10)

    def test_negative_amount_is_stored_as_given(self):
        """Test that amounts are not sign-checked."""
        tx = Transaction(date="2024-05-01", type="expense", amount=-50)
        assert tx.amount == -50

    def test_blank_amount_is_zero(self):
        tx = Transaction(date="2024-05-01", type="expense", amount="")
        assert tx.amount == 0

    def test_timestamp_is_truncated_to_day(self):
        """Test that a full timestamp keeps only its calendar day."""
        tx = Transaction(date="2024-05-31T23:59:59", type="expense", amount=1)
        assert tx.date == date(2024, 5, 31)

    def test_month_and_day_keys(self):
        tx = Transaction(date=date(2024, 5, 3), type="income", amount=1)
        assert tx.month_key == "2024-05"
        assert tx.day_key == "2024-05-03"

    def test_to_record_shape(self):
        """Test conversion to the persisted JSON record."""
        tx = Transaction(
            id="abc123",
            date=date(2024, 5, 1),
            type=TransactionType.EXPENSE,
            category="Makan",
            note="lunch",
            amount=25000,
        )
        assert tx.to_record() == {
            "id": "abc123",
            "date": "2024-05-01",
            "type": "expense",
            "category": "Makan",
            "note": "lunch",
            "amount": 25000.0,
        }

    def test_loads_stored_record(self):
        """Test a record written by an older version loads unchanged."""
        record = {
            "id": "lx3k9a",
            "date": "2024-05-01",
            "type": "income",
            "category": "Umum",
            "note": "",
            "amount": 1000,
        }
        tx = Transaction.model_validate(record)
        assert tx.id == "lx3k9a"
        assert tx.date == date(2024, 5, 1)


class TestTrackerSettings:
    """Tests for the settings model and its merge rules."""

    def test_defaults(self):
        settings = TrackerSettings.defaults()
        assert settings.currency == "IDR"
        assert settings.monthly_expense_target == 3_000_000
        assert settings.daily_income_target == 200_000
        assert settings.start_week_on == 1

    def test_record_uses_camel_case(self):
        record = TrackerSettings.defaults().to_record()
        assert set(record) == {
            "currency",
            "monthlyExpenseTarget",
            "dailyIncomeTarget",
            "startWeekOn",
        }

    def test_partial_record_fills_defaults(self):
        settings = TrackerSettings.model_validate({"currency": "USD", "monthlyExpenseTarget": 100})
        assert settings.currency == "USD"
        assert settings.monthly_expense_target == 100
        assert settings.daily_income_target == 200_000

    def test_merge_coerces_numeric_string(self):
        """Test merge turns '5000' into 5000 and leaves other fields alone."""
        original = TrackerSettings.defaults()
        merged = original.merge({"monthlyExpenseTarget": "5000"})

        assert merged.monthly_expense_target == 5000
        assert merged.currency == original.currency
        assert merged.daily_income_target == original.daily_income_target
        assert merged.start_week_on == original.start_week_on

    def test_merge_does_not_mutate_original(self):
        original = TrackerSettings.defaults()
        original.merge({"monthlyExpenseTarget": "5000"})
        assert original.monthly_expense_target == 3_000_000

    def test_merge_accepts_snake_case_keys(self):
        merged = TrackerSettings.defaults().merge({"daily_income_target": 150000})
        assert merged.daily_income_target == 150000

    @pytest.mark.parametrize("bad_value", ["abc", "", None, "nan", "inf", "-10", True])
    def test_merge_keeps_previous_on_bad_number(self, bad_value):
        """Test non-numeric, blank, non-finite and negative values are ignored."""
        merged = TrackerSettings.defaults().merge({"monthlyExpenseTarget": bad_value})
        assert merged.monthly_expense_target == 3_000_000

    def test_merge_start_week_on(self):
        settings = TrackerSettings.defaults()
        assert settings.merge({"startWeekOn": "0"}).start_week_on == 0
        assert settings.merge({"startWeekOn": 6}).start_week_on == 6
        assert settings.merge({"startWeekOn": "7"}).start_week_on == 1
        assert settings.merge({"startWeekOn": "2.5"}).start_week_on == 1

    def test_merge_currency(self):
        settings = TrackerSettings.defaults()
        assert settings.merge({"currency": "USD"}).currency == "USD"
        assert settings.merge({"currency": ""}).currency == "IDR"
        assert settings.merge({"currency": "  "}).currency == "IDR"

    def test_merge_ignores_unknown_keys(self):
        merged = TrackerSettings.defaults().merge({"theme": "dark"})
        assert merged == TrackerSettings.defaults()


class TestFlashMessages:
    """Tests for one-shot flash messages."""

    def test_success_and_error_builders(self):
        assert FlashMessage.success("ok").type == FlashType.SUCCESS
        assert FlashMessage.error("bad").type == FlashType.ERROR

    def test_flash_lives_for_one_render(self):
        """Test a flash is returned once and then gone."""
        session = {}
        set_flash(session, FlashMessage.success("Transaksi ditambahkan."))

        first = consume_flash(session)
        assert first is not None
        assert first.msg == "Transaksi ditambahkan."
        assert consume_flash(session) is None

    def test_newer_flash_replaces_pending(self):
        session = {}
        set_flash(session, FlashMessage.success("first"))
        set_flash(session, FlashMessage.success("second"))
        assert consume_flash(session).msg == "second"

    def test_consume_accepts_plain_dict(self):
        session = {FLASH_KEY: {"type": "error", "msg": "Gagal"}}
        flash = consume_flash(session)
        assert flash == FlashMessage.error("Gagal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
