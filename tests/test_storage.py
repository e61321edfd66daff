"""
Tests for the document stores.

The in-memory store is exercised directly; the Google Sheets store runs
against fake worksheets so no network calls are made.
"""

import re

import pytest

from planner.config import GoogleSheetsSettings
from planner.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    NotFoundError,
    StoreUnavailableError,
    UnavailableDocumentStore,
)
from planner.services.storage.google_sheets import DOCUMENT_COLUMNS


class TestInMemoryStore:
    """Tests for the dictionary-backed store."""

    def test_add_and_get(self, store, run):
        """Test that an added document can be read back with timestamps."""
        document_id = run(store.add_document("tasks", {"title": "Book venue"}))
        document = run(store.get_document("tasks", document_id))
        assert document.data == {"title": "Book venue"}
        assert document.created_at is not None
        assert document.created_at == document.updated_at

    def test_get_missing_returns_none(self, store, run):
        """Test that a missing document is reported as absent."""
        assert run(store.get_document("tasks", "nope")) is None

    def test_update_merges_and_refreshes_updated_at(self, store, run):
        """Test that update merges fields and bumps updated_at."""
        document_id = run(store.add_document("tasks", {"title": "a", "status": "todo"}))
        before = run(store.get_document("tasks", document_id))
        run(store.update_document("tasks", document_id, {"status": "done"}))
        after = run(store.get_document("tasks", document_id))
        assert after.data == {"title": "a", "status": "done"}
        assert after.updated_at > before.updated_at
        assert after.created_at == before.created_at

    def test_update_missing_raises(self, store, run):
        """Test that updating a missing document raises NotFoundError."""
        with pytest.raises(NotFoundError):
            run(store.update_document("tasks", "nope", {"status": "done"}))

    def test_set_without_merge_replaces(self, store, run):
        """Test that set replaces all fields unless merging."""
        run(store.set_document("weddingProjects", "main", {"name": "A", "currency": "PLN"}))
        run(store.set_document("weddingProjects", "main", {"name": "B"}))
        document = run(store.get_document("weddingProjects", "main"))
        assert document.data == {"name": "B"}

    def test_delete_missing_is_noop(self, store, run):
        """Test that deleting a missing document is not an error."""
        run(store.delete_document("tasks", "nope"))

    def test_returned_documents_are_copies(self, store, run):
        """Test that mutating a read document doesn't change the store."""
        document_id = run(store.add_document("notes", {"tags": ["a"]}))
        document = run(store.get_document("notes", document_id))
        document.data["tags"].append("b")
        assert run(store.get_document("notes", document_id)).data["tags"] == ["a"]

    def test_failing_batch_applies_nothing(self, store, run):
        """Test that a batch hitting a missing document leaves the store untouched."""
        batch = store.batch()
        batch.create("tasks", {"title": "new"})
        batch.update("tasks", "missing", {"status": "done"})
        with pytest.raises(NotFoundError):
            run(store.commit_batch(batch))
        assert run(store.list_documents("tasks")) == []

    def test_batch_can_update_document_created_earlier_in_batch(self, store, run):
        """Test that later writes in a batch see earlier creates."""
        batch = store.batch()
        document_id = batch.create("tasks", {"title": "new"})
        batch.update("tasks", document_id, {"status": "done"})
        run(store.commit_batch(batch))
        assert run(store.get_document("tasks", document_id)).data == {"title": "new", "status": "done"}


class TestUnavailableStore:
    """Tests for the stand-in used when the store failed to initialise."""

    def test_every_call_raises(self, run):
        """Test that every operation fails immediately with the reason."""
        store = UnavailableDocumentStore("credentials missing")
        with pytest.raises(StoreUnavailableError, match="credentials missing"):
            run(store.list_documents("tasks"))
        with pytest.raises(StoreUnavailableError):
            run(store.add_document("tasks", {"title": "x"}))


# =============================================================================
# Google Sheets store against fake worksheets
# =============================================================================

class FakeWorksheet:
    """Just enough of gspread.Worksheet for the document store."""

    def __init__(self):
        self.rows = [list(DOCUMENT_COLUMNS)]

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append(list(row))

    def update(self, range_name=None, values=None, value_input_option=None):
        row_number = int(re.match(r"A(\d+):", range_name).group(1))
        self.rows[row_number - 1] = list(values[0])

    def delete_rows(self, index):
        del self.rows[index - 1]


class FakeSheetsClient:
    """Hands out one fake worksheet per collection."""

    def __init__(self):
        self.worksheets = {}

    def get_worksheet(self, collection):
        return self.worksheets.setdefault(collection, FakeWorksheet())


@pytest.fixture
def sheets_client():
    return FakeSheetsClient()


@pytest.fixture
def sheets_store(sheets_client):
    return GoogleSheetsDocumentStore(client=sheets_client)


class TestGoogleSheetsStore:
    """Tests for the Google Sheets document store."""

    def test_add_writes_one_row(self, sheets_store, sheets_client, run):
        """Test that a document becomes one row with JSON data."""
        document_id = run(sheets_store.add_document("guests", {"first_name": "Ola", "side": "bride"}))
        rows = sheets_client.worksheets["guests"].rows
        assert len(rows) == 2
        assert rows[1][0] == document_id
        assert rows[1][3] == '{"first_name": "Ola", "side": "bride"}'

    def test_round_trip(self, sheets_store, run):
        """Test that a written document reads back unchanged."""
        document_id = run(sheets_store.add_document("notes", {"title": "Zażółć", "tags": ["a"]}))
        document = run(sheets_store.get_document("notes", document_id))
        assert document.data == {"title": "Zażółć", "tags": ["a"]}
        assert document.created_at is not None

    def test_update_merges_in_place(self, sheets_store, sheets_client, run):
        """Test that update rewrites the existing row."""
        document_id = run(sheets_store.add_document("tasks", {"title": "a", "status": "todo"}))
        run(sheets_store.update_document("tasks", document_id, {"status": "done"}))
        assert len(sheets_client.worksheets["tasks"].rows) == 2
        document = run(sheets_store.get_document("tasks", document_id))
        assert document.data == {"title": "a", "status": "done"}

    def test_update_missing_raises(self, sheets_store, run):
        """Test that updating a missing row raises NotFoundError."""
        with pytest.raises(NotFoundError):
            run(sheets_store.update_document("tasks", "nope", {"status": "done"}))

    def test_delete_removes_row(self, sheets_store, run):
        """Test that delete removes the document's row."""
        keep = run(sheets_store.add_document("tasks", {"title": "keep"}))
        drop = run(sheets_store.add_document("tasks", {"title": "drop"}))
        run(sheets_store.delete_document("tasks", drop))
        assert [d.id for d in run(sheets_store.list_documents("tasks"))] == [keep]

    def test_malformed_row_skipped(self, sheets_store, sheets_client, run):
        """Test that a hand-edited broken row doesn't break listing."""
        run(sheets_store.add_document("tasks", {"title": "ok"}))
        sheets_client.worksheets["tasks"].rows.append(["broken", "not-a-date", "", "{}"])
        documents = run(sheets_store.list_documents("tasks"))
        assert [d.data["title"] for d in documents] == ["ok"]

    def test_batch_applied_in_order(self, sheets_store, run):
        """Test that a batch's writes are applied in the order queued."""
        batch = sheets_store.batch()
        document_id = batch.create("budgetScenarios", {"name": "A", "is_active": False})
        batch.update("budgetScenarios", document_id, {"is_active": True})
        run(sheets_store.commit_batch(batch))
        document = run(sheets_store.get_document("budgetScenarios", document_id))
        assert document.data["is_active"] is True

    def test_unexpected_errors_wrapped(self, run):
        """Test that gspread failures surface as StorageError."""
        from planner.services.storage import StorageError

        class BrokenClient:
            def get_worksheet(self, collection):
                raise RuntimeError("quota exceeded")

        store = GoogleSheetsDocumentStore(client=BrokenClient())
        with pytest.raises(StorageError, match="quota exceeded"):
            run(store.list_documents("tasks"))


class TestGoogleSheetsClient:
    """Tests for connecting to Google Sheets."""

    def test_missing_credentials_file_is_unavailable(self, tmp_path):
        """Test that a missing credentials file reports the store as unavailable."""
        settings = GoogleSheetsSettings(
            credentials_path=str(tmp_path / "missing.json"),
            spreadsheet_id="sheet-id",
        )
        client = GoogleSheetsClient(settings=settings)
        with pytest.raises(StoreUnavailableError, match="credentials file not found"):
            client.get_spreadsheet()
