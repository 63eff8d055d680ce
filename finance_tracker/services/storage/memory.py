"""In-memory document storage, used when persistence is disabled and in tests."""

import copy
from typing import Any, Optional

from finance_tracker.services.storage.interface import DocumentStorage


class InMemoryStorage(DocumentStorage):
    """Keeps documents in a dict; nothing survives the process."""

    def __init__(self, documents: Optional[dict[str, Any]] = None):
        super().__init__()
        self._documents: dict[str, Any] = copy.deepcopy(documents) if documents else {}

    @property
    def documents(self) -> dict[str, Any]:
        return self._documents

    async def _read_document(self, name: str) -> Optional[Any]:
        # Copies so callers can't mutate stored state without a save
        return copy.deepcopy(self._documents.get(name))

    async def _write_document(self, name: str, data: Any) -> None:
        self._documents[name] = copy.deepcopy(data)
