"""
Abstract Document Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep Google Sheets as the live backend
2. Use in-memory storage for testing
3. Swap in a real document database later without touching the repositories

The interface is intentionally small - collections of JSON documents,
each with a store-assigned id and store-assigned timestamps. Filtering,
sorting and aggregation happen in Python on whole collections.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from planner.models.common import StoredDocument


def utc_now() -> datetime:
    """Timestamp source for everything the store stamps."""
    return datetime.now(timezone.utc)


def new_document_id() -> str:
    """Opaque identifier for a new document."""
    return uuid4().hex


class BatchOperation(BaseModel):
    """One queued write inside a WriteBatch."""

    kind: Literal["create", "set", "update", "delete"]
    collection: str
    document_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    merge: bool = False


class WriteBatch:
    """
    An ordered group of writes applied by DocumentStoreInterface.commit_batch().

    Ids for created documents are assigned when the write is queued,
    so callers can reference a new document in later writes of the
    same batch.
    """

    def __init__(self):
        self.operations: list[BatchOperation] = []

    def create(self, collection: str, data: dict[str, Any]) -> str:
        document_id = new_document_id()
        self.operations.append(BatchOperation(
            kind="create",
            collection=collection,
            document_id=document_id,
            data=data,
        ))
        return document_id

    def set(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        self.operations.append(BatchOperation(
            kind="set",
            collection=collection,
            document_id=document_id,
            data=data,
            merge=merge,
        ))

    def update(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self.operations.append(BatchOperation(
            kind="update",
            collection=collection,
            document_id=document_id,
            data=data,
        ))

    def delete(self, collection: str, document_id: str) -> None:
        self.operations.append(BatchOperation(
            kind="delete",
            collection=collection,
            document_id=document_id,
        ))

    def __len__(self) -> int:
        return len(self.operations)


class DocumentStoreInterface(ABC):
    """
    Abstract interface for the remote document store.

    Any storage implementation (Google Sheets, in-memory, a real
    document database) must implement these methods.

    Timestamps: created_at is stamped when a document is first written,
    updated_at on every write. Callers never supply either.
    """

    @abstractmethod
    async def list_documents(self, collection: str) -> list[StoredDocument]:
        """
        Return every document in a collection, in no particular order.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def get_document(
        self,
        collection: str,
        document_id: str,
    ) -> Optional[StoredDocument]:
        """
        Retrieve one document.

        Returns:
            The document if found, None otherwise
        """
        pass

    @abstractmethod
    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        """
        Create a document with a fresh identifier.

        Returns:
            The new document's id
        """
        pass

    @abstractmethod
    async def set_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """
        Write a document under a known id, creating it if missing.

        With merge=True the fields are merged into an existing document;
        otherwise the document's fields are replaced.
        """
        pass

    @abstractmethod
    async def update_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        """
        Merge fields into an existing document.

        Raises:
            NotFoundError: If the document doesn't exist
        """
        pass

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        pass

    @abstractmethod
    async def commit_batch(self, batch: WriteBatch) -> None:
        """
        Apply every write of a batch, in order.

        Raises:
            NotFoundError: If an update targets a missing document
        """
        pass

    def batch(self) -> WriteBatch:
        """Start a new write batch."""
        return WriteBatch()


class UnavailableDocumentStore(DocumentStoreInterface):
    """
    Stand-in used when the real store could not be initialised.

    Every operation fails immediately with the original reason, so the
    UI can show it without anything queueing or retrying.
    """

    def __init__(self, reason: str):
        self.reason = reason

    def _fail(self):
        raise StoreUnavailableError(f"Document store is not available: {self.reason}")

    async def list_documents(self, collection: str) -> list[StoredDocument]:
        self._fail()

    async def get_document(self, collection: str, document_id: str) -> Optional[StoredDocument]:
        self._fail()

    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        self._fail()

    async def set_document(self, collection, document_id, data, merge=False) -> None:
        self._fail()

    async def update_document(self, collection, document_id, data) -> None:
        self._fail()

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._fail()

    async def commit_batch(self, batch: WriteBatch) -> None:
        self._fail()


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StoreUnavailableError(StorageError):
    """Could not connect to or initialise the storage backend."""
    pass
