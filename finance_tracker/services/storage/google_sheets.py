"""
Google Sheets Document Storage Implementation

DESIGN DECISION: In production the app keeps its two JSON documents in a
spreadsheet worksheet used as a small object store:
1. No database setup required
2. The data can be viewed (and rescued) directly in Sheets
3. Built-in backup (Google's infrastructure)

Each document is one row: [name, updated_at, content...]. The name is
"<prefix>/<document>" so several deployments can share one spreadsheet.
Sheets limits a cell to 50,000 characters, so the JSON content is split
across as many trailing cells as it needs.

TRADEOFFS:
- Last writer wins; there is no locking across requests
- Every read fetches the whole worksheet (fine for two documents)
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.services.storage.interface import (
    DocumentStorage,
    StorageConnectionError,
    StorageError,
)


DOCUMENT_COLUMNS = [
    "name",
    "updated_at",
    "content",
]

# Sheets rejects cells longer than 50,000 characters
CELL_CHUNK_SIZE = 45_000

NOT_CONFIGURED_MESSAGE = (
    "Remote storage is not configured: set GOOGLE_SHEETS_CREDENTIALS_PATH "
    "and GOOGLE_SHEETS_SPREADSHEET_ID"
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            if not self.is_configured:
                raise StorageConnectionError(NOT_CONFIGURED_MESSAGE)
            try:
                self._client = self._authorize()
            except FileNotFoundError as e:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(FileNotFoundError),
        reraise=True,
    )
    def _authorize(self) -> gspread.Client:
        scopes = [
            "https://www.googleapis.com/auth/spreadsheets",
            "https://www.googleapis.com/auth/drive",
        ]
        credentials = Credentials.from_service_account_file(
            self._settings.credentials_path,
            scopes=scopes,
        )
        return gspread.authorize(credentials)

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def get_documents_sheet(self) -> gspread.Worksheet:
        """Get or create the documents worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.documents_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.documents_sheet_name,
                rows=100,
                cols=len(DOCUMENT_COLUMNS),
            )
            sheet.append_row(DOCUMENT_COLUMNS)
        return sheet


class GoogleSheetsDocumentStorage(DocumentStorage):
    """
    Google Sheets implementation of document storage.

    Missing documents are not created on read; the caller gets the
    default value until the first write.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    @property
    def prefix(self) -> str:
        return self._client.settings.document_prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}/{name}"

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> tuple[Optional[int], list]:
        """Locate a document row. Returns (1-based row index, row values)."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if row and row[0] == key:
                return idx, row
        return None, []

    async def _read_document(self, name: str) -> Optional[Any]:
        key = self._key(name)
        row = await self._fetch_row(key)

        content = "".join(row[2:])
        if not content:
            return None

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"{key} is not valid JSON: {e}") from e

    async def _write_document(self, name: str, data: Any) -> None:
        if not self._client.is_configured:
            raise StorageConnectionError(NOT_CONFIGURED_MESSAGE)
        await self._put_row(self._key(name), json.dumps(data, ensure_ascii=False))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(StorageConnectionError),
        reraise=True,
    )
    async def _fetch_row(self, key: str) -> list:
        try:
            sheet = self._client.get_documents_sheet()
            _, row = self._find_row(sheet, key)
            return row
        except StorageError:
            raise
        except Exception as e:
            self._logger.error("document_read_failed", document=key, error=str(e))
            raise StorageError(f"Failed to read {key}: {e}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(StorageConnectionError),
        reraise=True,
    )
    async def _put_row(self, key: str, content: str) -> None:
        """Insert or replace the row holding `key`."""
        chunks = [
            content[i:i + CELL_CHUNK_SIZE]
            for i in range(0, len(content), CELL_CHUNK_SIZE)
        ] or [""]
        new_row = [key, datetime.now(timezone.utc).isoformat(), *chunks]

        try:
            sheet = self._client.get_documents_sheet()
            idx, old_row = self._find_row(sheet, key)

            if sheet.col_count < len(new_row):
                sheet.add_cols(len(new_row) - sheet.col_count)

            if idx is None:
                sheet.append_row(new_row, value_input_option="RAW")
            else:
                # Blank out chunks left over from a longer previous version
                padded = new_row + [""] * max(len(old_row) - len(new_row), 0)
                sheet.update(
                    range_name=f"A{idx}",
                    values=[padded],
                    value_input_option="RAW",
                )
        except StorageError:
            raise
        except Exception as e:
            self._logger.error("document_write_failed", document=key, error=str(e))
            raise StorageError(f"Failed to write {key}: {e}") from e

        self._logger.info("document_written", document=key, chunks=len(chunks))
