"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Run against local JSON files in development
2. Run against a remote document store in production
3. Use in-memory storage for testing
4. Keep business logic decoupled from where the data lives

The interface is intentionally tiny: the whole transaction collection and
the settings record are each read and written in full. There are no
partial or per-record writes.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import ValidationError

from finance_tracker.logger import get_logger
from finance_tracker.models.settings import TrackerSettings
from finance_tracker.models.transaction import Transaction


TRANSACTIONS_DOCUMENT = "transactions.json"
SETTINGS_DOCUMENT = "settings.json"


class FinanceStorageInterface(ABC):
    """
    Abstract interface for finance data storage.

    Any storage implementation (local files, remote documents, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def load_transactions(self) -> list[Transaction]:
        """
        Load the full transaction collection.

        Returns:
            All stored transactions that parse, or an empty list if nothing
            is stored yet. Records that fail validation are skipped and kept
            aside so the next save writes them back unchanged.

        Raises:
            StorageError: If the document cannot be read or is not a list
        """
        pass

    @abstractmethod
    async def save_transactions(self, transactions: list[Transaction]) -> bool:
        """
        Overwrite the full transaction collection.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def load_settings(self) -> TrackerSettings:
        """
        Load the settings record.

        Returns:
            The stored settings, or the defaults if nothing is stored yet
        """
        pass

    @abstractmethod
    async def save_settings(self, settings: TrackerSettings) -> bool:
        """
        Overwrite the settings record.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass


class DocumentStorage(FinanceStorageInterface):
    """
    Storage that keeps each collection as one named JSON document.

    Subclasses only move raw JSON values in and out; parsing into models
    and default handling live here so every backend behaves the same.
    """

    def __init__(self):
        self._logger = get_logger(type(self).__module__)
        # Raw records from the last load that failed validation; re-appended on save
        self._rejected_records: list[Any] = []

    @abstractmethod
    async def _read_document(self, name: str) -> Optional[Any]:
        """Return the decoded JSON document, or None if it doesn't exist."""
        pass

    @abstractmethod
    async def _write_document(self, name: str, data: Any) -> None:
        """Replace the named document with `data`."""
        pass

    async def _on_missing_document(self, name: str, default: Any) -> None:
        """Hook called when a document is absent. Default: do nothing."""
        return None

    async def load_transactions(self) -> list[Transaction]:
        data = await self._read_document(TRANSACTIONS_DOCUMENT)
        if data is None:
            self._rejected_records = []
            await self._on_missing_document(TRANSACTIONS_DOCUMENT, [])
            return []

        if not isinstance(data, list):
            raise StorageError(
                f"{TRANSACTIONS_DOCUMENT} must hold a JSON list, got {type(data).__name__}"
            )

        transactions = []
        rejected = []
        for record in data:
            try:
                transactions.append(Transaction.model_validate(record))
            except ValidationError as e:
                rejected.append(record)
                self._logger.warning(
                    "transaction_skipped",
                    id=record.get("id") if isinstance(record, dict) else None,
                    error=str(e),
                )
        self._rejected_records = rejected

        self._logger.debug(
            "transactions_loaded", count=len(transactions), skipped=len(rejected)
        )
        return transactions

    @property
    def rejected_records(self) -> list[Any]:
        """Records from the last load that could not be parsed."""
        return list(self._rejected_records)

    async def save_transactions(self, transactions: list[Transaction]) -> bool:
        records = [t.to_record() for t in transactions]
        records.extend(self._rejected_records)
        await self._write_document(TRANSACTIONS_DOCUMENT, records)
        self._logger.info("transactions_saved", count=len(records))
        return True

    async def load_settings(self) -> TrackerSettings:
        data = await self._read_document(SETTINGS_DOCUMENT)
        if data is None:
            defaults = TrackerSettings.defaults()
            await self._on_missing_document(SETTINGS_DOCUMENT, defaults.to_record())
            return defaults

        if not isinstance(data, dict):
            raise StorageError(
                f"{SETTINGS_DOCUMENT} must hold a JSON object, got {type(data).__name__}"
            )

        try:
            return TrackerSettings.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Malformed {SETTINGS_DOCUMENT}: {e}") from e

    async def save_settings(self, settings: TrackerSettings) -> bool:
        await self._write_document(SETTINGS_DOCUMENT, settings.to_record())
        self._logger.info("settings_saved")
        return True


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
