"""Services package."""

from planner.services.storage import (
    DocumentStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    UnavailableDocumentStore,
    WriteBatch,
)

__all__ = [
    "DocumentStoreInterface",
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "NotFoundError",
    "StorageError",
    "StoreUnavailableError",
    "UnavailableDocumentStore",
    "WriteBatch",
]
