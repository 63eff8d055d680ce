"""
Storage Services Package

Provides the abstract storage interface and its implementations:
local JSON files (development), Google Sheets documents (production)
and in-memory (tests / storage disabled).
"""

from finance_tracker.services.storage.interface import (
    SETTINGS_DOCUMENT,
    TRANSACTIONS_DOCUMENT,
    DocumentStorage,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from finance_tracker.services.storage.local_file import LocalFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStorage,
)

__all__ = [
    # Interfaces
    "DocumentStorage",
    "FinanceStorageInterface",
    # Document names
    "SETTINGS_DOCUMENT",
    "TRANSACTIONS_DOCUMENT",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStorage",
    "InMemoryStorage",
    "LocalFileStorage",
]
