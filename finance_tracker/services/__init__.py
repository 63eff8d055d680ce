"""Services package."""

from finance_tracker.services.storage import (
    DocumentStorage,
    DuplicateError,
    FinanceStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStorage,
    InMemoryStorage,
    LocalFileStorage,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Storage services
    "DocumentStorage",
    "DuplicateError",
    "FinanceStorageInterface",
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStorage",
    "InMemoryStorage",
    "LocalFileStorage",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
]
