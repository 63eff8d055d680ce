"""
Main Orchestrator for Finance Tracker

This module ties together storage and the aggregation engine and defines
the flows the UI calls:
1. Transactions (list, get, create, update, delete)
2. Settings (get, update)
3. Reports (current-month dashboard, monthly report)

DESIGN DECISION: Every write is a whole-collection read-modify-write:
load everything, change it in memory, save everything back. Concurrent
writers race and the last one wins; that is accepted for a single-user
tracker.

Write flows return a FlashMessage rather than stashing it anywhere, so the
caller decides where it lives until the next render.
"""

import datetime as dt
from typing import Any, Optional

from finance_tracker.config import Settings, get_settings
from finance_tracker.logger import get_logger
from finance_tracker.models.flash import FlashMessage
from finance_tracker.models.report import DashboardView, MonthReport
from finance_tracker.models.settings import TrackerSettings
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.reports import (
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
from finance_tracker.services.storage import (
    DuplicateError,
    FinanceStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStorage,
    InMemoryStorage,
    LocalFileStorage,
    NotFoundError,
    StorageError,
)


logger = get_logger(__name__)


class TransactionFlow:
    """
    Orchestrates transaction changes.

    The id of a transaction is assigned here on creation and is never
    changed by an update.
    """

    def __init__(self, storage: FinanceStorageInterface):
        self._storage = storage

    async def list_transactions(self, newest_first: bool = True) -> list[Transaction]:
        """All transactions sorted by date (stable for same-day entries)."""
        transactions = await self._storage.load_transactions()
        return sorted(transactions, key=lambda t: t.date, reverse=newest_first)

    async def get_transaction(self, transaction_id: str) -> Transaction:
        """
        Raises:
            NotFoundError: If no transaction has this id
        """
        for transaction in await self._storage.load_transactions():
            if transaction.id == transaction_id:
                return transaction
        raise NotFoundError(f"Transaction not found: {transaction_id}")

    async def create_transaction(
        self,
        date: dt.date,
        type: TransactionType,
        amount: float,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> tuple[Transaction, FlashMessage]:
        """
        Add a transaction and persist the whole collection.

        Returns:
            (transaction, flash_message)
        """
        transaction = Transaction(
            date=date,
            type=type,
            amount=amount,
            category=category,
            note=note,
        )

        transactions = await self._storage.load_transactions()
        if any(t.id == transaction.id for t in transactions):
            raise DuplicateError(f"Transaction id already exists: {transaction.id}")

        transactions.append(transaction)
        await self._storage.save_transactions(transactions)

        logger.info(
            "transaction_created",
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=transaction.amount,
        )
        return transaction, FlashMessage.success("Transaksi ditambahkan.")

    async def update_transaction(
        self,
        transaction_id: str,
        date: dt.date,
        type: TransactionType,
        amount: float,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> tuple[Transaction, FlashMessage, str]:
        """
        Replace every editable field of an existing transaction.

        Returns:
            (transaction, flash_message, year_month of the new date)

        Raises:
            NotFoundError: If no transaction has this id
        """
        transactions = await self._storage.load_transactions()

        for idx, existing in enumerate(transactions):
            if existing.id == transaction_id:
                break
        else:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        updated = Transaction(
            id=existing.id,
            date=date,
            type=type,
            amount=amount,
            category=category,
            note=note,
        )
        transactions[idx] = updated
        await self._storage.save_transactions(transactions)

        logger.info("transaction_updated", transaction_id=updated.id)
        return updated, FlashMessage.success("Transaksi diperbarui."), updated.month_key

    async def delete_transaction(self, transaction_id: str) -> FlashMessage:
        """
        Remove a transaction. Unknown ids are a no-op.

        Returns:
            flash_message
        """
        transactions = await self._storage.load_transactions()
        remaining = [t for t in transactions if t.id != transaction_id]
        await self._storage.save_transactions(remaining)

        logger.info(
            "transaction_deleted",
            transaction_id=transaction_id,
            removed=len(transactions) - len(remaining),
        )
        return FlashMessage.success("Transaksi dihapus.")


class SettingsFlow:
    """Read and update the settings record."""

    def __init__(self, storage: FinanceStorageInterface):
        self._storage = storage

    async def get_settings(self) -> TrackerSettings:
        return await self._storage.load_settings()

    async def update_settings(
        self,
        form: dict[str, Any],
    ) -> tuple[TrackerSettings, FlashMessage]:
        """
        Merge a (partial) form into the stored settings and save them.

        Returns:
            (settings, flash_message)
        """
        current = await self._storage.load_settings()
        merged = current.merge(form)
        await self._storage.save_settings(merged)

        logger.info("settings_updated", **merged.to_record())
        return merged, FlashMessage.success("Settings tersimpan!")


class ReportFlow:
    """
    Builds the dashboard and monthly report views.

    Loads data, then hands everything to the pure aggregation functions.
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        recent_limit: int = 12,
    ):
        self._storage = storage
        self._recent_limit = recent_limit

    async def dashboard(self, today: Optional[dt.date] = None) -> DashboardView:
        """Current month totals plus suggestions against the targets."""
        today = today or dt.date.today()

        settings = await self._storage.load_settings()
        transactions = sorted(
            await self._storage.load_transactions(),
            key=lambda t: t.date,
            reverse=True,
        )

        year_month = current_month(today)
        month = filter_by_month(transactions, year_month)
        summary = summarize(month)
        income_so_far = income_up_to(daily_buckets(month), today)

        return DashboardView(
            settings=settings,
            year_month=year_month,
            summary=summary,
            expense_left=expense_left(settings, summary),
            suggest_daily_expense=suggest_daily_expense(
                settings,
                summary,
                days_in_month(year_month),
                today.day,
            ),
            daily_target_delta=daily_target_delta(settings, income_so_far, today.day),
            recent_transactions=month[:self._recent_limit],
        )

    async def month_report(
        self,
        year_month: Optional[str] = None,
        today: Optional[dt.date] = None,
    ) -> MonthReport:
        """
        Totals, category breakdown and day-by-day calendar for a month.

        Raises:
            InvalidMonthDesignator: If year_month is not YYYY-MM
        """
        year_month = year_month or current_month(today or dt.date.today())
        parse_month(year_month)

        settings = await self._storage.load_settings()
        transactions = sorted(
            await self._storage.load_transactions(),
            key=lambda t: t.date,
        )

        month = filter_by_month(transactions, year_month)
        return MonthReport(
            settings=settings,
            year_month=year_month,
            summary=summarize(month),
            categories=category_breakdown(month),
            days=build_month_calendar(year_month, daily_buckets(month)),
        )


def build_storage(settings: Optional[Settings] = None) -> FinanceStorageInterface:
    """Pick the storage backend from configuration."""
    settings = settings or get_settings()

    if settings.app.use_remote_storage:
        logger.info("storage_selected", backend="remote")
        return GoogleSheetsDocumentStorage(GoogleSheetsClient(settings.google_sheets))

    logger.info("storage_selected", backend="local")
    return LocalFileStorage(settings.local_storage.data_dir)


def health_status(
    settings: Optional[Settings] = None,
    storage_error: Optional[str] = None,
) -> dict[str, Any]:
    """
    Quick deployment check: which backend is active and whether it can write.

    Pass storage_error when the configured backend failed to start and the
    app is running in memory; the status then reports ok=False with the error.
    """
    settings = settings or get_settings()
    sheets = settings.google_sheets
    status = {
        "ok": storage_error is None,
        "env": "remote" if settings.app.use_remote_storage else "local",
        "has_credentials": sheets.is_configured,
        "prefix": sheets.document_prefix,
    }
    if storage_error is not None:
        status["env"] = "memory"
        status["error"] = storage_error
    return status


def create_app_components(
    use_storage: bool = True,
) -> tuple[TransactionFlow, SettingsFlow, ReportFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured storage backend.
                    Set to False to keep everything in memory.

    Returns:
        (transaction_flow, settings_flow, report_flow)

    Raises:
        StorageError: If the configured backend cannot be set up. Callers
            that keep running must ask for use_storage=False themselves.
    """
    settings = get_settings()
    storage: FinanceStorageInterface

    if use_storage:
        try:
            storage = build_storage(settings)
        except StorageError as e:
            logger.error("storage_unavailable", error=str(e))
            raise
    else:
        storage = InMemoryStorage()

    return (
        TransactionFlow(storage),
        SettingsFlow(storage),
        ReportFlow(storage, recent_limit=settings.app.recent_transactions_limit),
    )
