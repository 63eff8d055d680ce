"""
Local File Storage Implementation

Used in development: transactions.json and settings.json live in a data
directory next to the app. Missing documents are created on first read
([] for transactions, the defaults for settings) so the files are there to
inspect and edit by hand.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from finance_tracker.config import get_settings
from finance_tracker.services.storage.interface import DocumentStorage, StorageError


class LocalFileStorage(DocumentStorage):
    """JSON documents on the local filesystem."""

    def __init__(self, data_dir: Optional[Path] = None):
        super().__init__()
        self._data_dir = Path(data_dir or get_settings().local_storage.data_dir)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self._data_dir}: {e}") from e

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, name: str) -> Path:
        return self._data_dir / name

    async def _read_document(self, name: str) -> Optional[Any]:
        path = self._path(name)
        if not path.exists():
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StorageError(f"{path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def _write_document(self, name: str, data: Any) -> None:
        path = self._path(name)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            self._logger.error("document_write_failed", document=name, error=str(e))
            raise StorageError(f"Failed to write {path}: {e}") from e

    async def _on_missing_document(self, name: str, default: Any) -> None:
        self._logger.info("document_initialized", document=name, path=str(self._path(name)))
        await self._write_document(name, default)
