"""
Storage Services Package

Provides the abstract document store interface and its implementations.
Google Sheets is the live backend; the in-memory store backs the tests.
"""

from planner.services.storage.interface import (
    BatchOperation,
    DocumentStoreInterface,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    UnavailableDocumentStore,
    WriteBatch,
    new_document_id,
    utc_now,
)
from planner.services.storage.memory import InMemoryDocumentStore
from planner.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
)

__all__ = [
    # Interface
    "BatchOperation",
    "DocumentStoreInterface",
    "WriteBatch",
    "new_document_id",
    "utc_now",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StoreUnavailableError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "UnavailableDocumentStore",
]
