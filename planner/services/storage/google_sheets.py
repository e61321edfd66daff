"""
Google Sheets Document Store

DESIGN DECISION: Google Sheets is used as the live backend because:
1. The couple can look at (and fix) their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

LAYOUT: one worksheet per collection, one document per row:
    id | created_at | updated_at | data_json

TRADEOFFS:
- Not suitable for high-volume data (a wedding has hundreds of rows at most)
- No transactions (batches are applied in order; a failure mid-batch
  leaves the earlier writes in place)
- No query capabilities (we filter in Python)

gspread is synchronous, so every call runs in a worker thread. That keeps
the event loop free for the dashboard's parallel reads and its timeout.
"""

import asyncio
import json
from datetime import datetime
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from planner.config import GoogleSheetsSettings, get_settings
from planner.log import get_logger
from planner.models.common import StoredDocument
from planner.services.storage.interface import (
    DocumentStoreInterface,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    WriteBatch,
    new_document_id,
    utc_now,
)


DOCUMENT_COLUMNS = [
    "id",
    "created_at",
    "updated_at",
    "data_json",
]

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

logger = get_logger(__name__)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and hands out one worksheet per collection.
    Opening the spreadsheet is retried; nothing after that is.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._settings = settings or get_settings().google_sheets
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}

    @retry(
        retry=retry_if_not_exception_type(gspread.SpreadsheetNotFound),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _open(self, credentials: Credentials) -> tuple[gspread.Client, gspread.Spreadsheet]:
        client = gspread.authorize(credentials)
        return client, client.open_by_key(self._settings.spreadsheet_id)

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """
        Get the configured spreadsheet, connecting on first use.

        Uses service account credentials for authentication.
        """
        if self._spreadsheet is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
            except FileNotFoundError:
                raise StoreUnavailableError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except ValueError as e:
                raise StoreUnavailableError(f"Invalid Google credentials: {e}")

            try:
                self._client, self._spreadsheet = self._open(credentials)
            except gspread.SpreadsheetNotFound:
                raise StoreUnavailableError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
            except Exception as e:
                raise StoreUnavailableError(f"Failed to connect to Google Sheets: {e}")
        return self._spreadsheet

    def get_worksheet(self, collection: str) -> gspread.Worksheet:
        """Get or create the worksheet backing a collection."""
        if collection in self._worksheets:
            return self._worksheets[collection]

        spreadsheet = self.get_spreadsheet()
        title = f"{self._settings.worksheet_prefix}{collection}"
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(DOCUMENT_COLUMNS),
            )
            sheet.append_row(DOCUMENT_COLUMNS)
            logger.info("worksheet_created", collection=collection, title=title)

        self._worksheets[collection] = sheet
        return sheet


class GoogleSheetsDocumentStore(DocumentStoreInterface):
    """
    Google Sheets implementation of the document store.

    Entity fields are JSON-serialized into a single cell so that the
    column layout never changes when a model gains a field.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _document_to_row(document: StoredDocument) -> list[str]:
        """Convert a document to a spreadsheet row."""
        return [
            document.id,
            document.created_at.isoformat() if document.created_at else "",
            document.updated_at.isoformat() if document.updated_at else "",
            json.dumps(document.data, ensure_ascii=False, sort_keys=True),
        ]

    @staticmethod
    def _row_to_document(row: list) -> StoredDocument:
        """Convert a spreadsheet row to a document."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return StoredDocument(
            id=safe_get(0),
            created_at=datetime.fromisoformat(safe_get(1)) if safe_get(1) else None,
            updated_at=datetime.fromisoformat(safe_get(2)) if safe_get(2) else None,
            data=json.loads(safe_get(3)) if safe_get(3) else {},
        )

    def _find_row(
        self,
        sheet: gspread.Worksheet,
        document_id: str,
    ) -> tuple[Optional[int], Optional[StoredDocument]]:
        """Locate a document; returns (1-based row number, document) or (None, None)."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Start from 2 (row 1 is header)
            if row and row[0] == document_id:
                return idx, self._row_to_document(row)
        return None, None

    @staticmethod
    def _write_row(sheet: gspread.Worksheet, row_number: int, row: list[str]) -> None:
        sheet.update(
            range_name=f"A{row_number}:D{row_number}",
            values=[row],
            value_input_option="RAW",
        )

    # Sync operations (run in a worker thread)

    def _list(self, collection: str) -> list[StoredDocument]:
        sheet = self._client.get_worksheet(collection)
        all_rows = sheet.get_all_values()[1:]  # Skip header

        documents = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                documents.append(self._row_to_document(row))
            except ValueError as e:
                # Hand-edited rows can be malformed; skip them rather than break the page
                logger.warning(
                    "malformed_row_skipped",
                    collection=collection,
                    document_id=row[0],
                    error=str(e),
                )
        return documents

    def _get(self, collection: str, document_id: str) -> Optional[StoredDocument]:
        sheet = self._client.get_worksheet(collection)
        _, document = self._find_row(sheet, document_id)
        return document

    def _create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        now = utc_now()
        sheet = self._client.get_worksheet(collection)
        row = self._document_to_row(StoredDocument(
            id=document_id,
            data=data,
            created_at=now,
            updated_at=now,
        ))
        sheet.append_row(row, value_input_option="RAW")

    def _set(self, collection: str, document_id: str, data: dict[str, Any], merge: bool) -> None:
        sheet = self._client.get_worksheet(collection)
        row_number, existing = self._find_row(sheet, document_id)
        if existing is None:
            self._create(collection, document_id, data)
            return
        existing.data = {**existing.data, **data} if merge else dict(data)
        existing.updated_at = utc_now()
        self._write_row(sheet, row_number, self._document_to_row(existing))

    def _update(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        sheet = self._client.get_worksheet(collection)
        row_number, existing = self._find_row(sheet, document_id)
        if existing is None:
            raise NotFoundError(f"{collection}/{document_id} does not exist")
        existing.data = {**existing.data, **data}
        existing.updated_at = utc_now()
        self._write_row(sheet, row_number, self._document_to_row(existing))

    def _delete(self, collection: str, document_id: str) -> None:
        sheet = self._client.get_worksheet(collection)
        row_number, _ = self._find_row(sheet, document_id)
        if row_number is not None:
            sheet.delete_rows(row_number)

    def _apply(self, batch: WriteBatch) -> None:
        for op in batch.operations:
            if op.kind == "create":
                self._create(op.collection, op.document_id, op.data)
            elif op.kind == "set":
                self._set(op.collection, op.document_id, op.data, op.merge)
            elif op.kind == "update":
                self._update(op.collection, op.document_id, op.data)
            else:
                self._delete(op.collection, op.document_id)

    async def _run(self, description: str, func, *args):
        """Run a sync operation off the event loop, normalising failures."""
        try:
            return await asyncio.to_thread(func, *args)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to {description}: {e}") from e

    # DocumentStoreInterface

    async def list_documents(self, collection: str) -> list[StoredDocument]:
        return await self._run(f"list {collection}", self._list, collection)

    async def get_document(
        self,
        collection: str,
        document_id: str,
    ) -> Optional[StoredDocument]:
        return await self._run(f"get {collection}/{document_id}", self._get, collection, document_id)

    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        document_id = new_document_id()
        await self._run(f"add to {collection}", self._create, collection, document_id, data)
        return document_id

    async def set_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        await self._run(
            f"set {collection}/{document_id}",
            self._set, collection, document_id, data, merge,
        )

    async def update_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        await self._run(
            f"update {collection}/{document_id}",
            self._update, collection, document_id, data,
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._run(
            f"delete {collection}/{document_id}",
            self._delete, collection, document_id,
        )

    async def commit_batch(self, batch: WriteBatch) -> None:
        await self._run(f"commit batch of {len(batch)} writes", self._apply, batch)
