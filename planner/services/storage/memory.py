"""
In-Memory Document Store

Keeps every collection in a dict. Used by the test-suite and by
PLANNER_STORAGE_BACKEND=memory for trying the app without Google
credentials. Nothing survives a restart.

Batches are validated before anything is applied, so a batch that
hits a missing document leaves the store untouched.
"""

import asyncio
import copy
from datetime import datetime
from typing import Any, Callable, Optional

from planner.models.common import StoredDocument
from planner.services.storage.interface import (
    DocumentStoreInterface,
    NotFoundError,
    WriteBatch,
    new_document_id,
    utc_now,
)


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dictionary-backed implementation of the document store."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Timestamp source. Tests pass a ticking clock to get
                   strictly increasing created_at values.
        """
        self._clock = clock or utc_now
        self._collections: dict[str, dict[str, StoredDocument]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> dict[str, StoredDocument]:
        return self._collections.setdefault(name, {})

    # Sync primitives - callers hold the lock

    def _create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        now = self._clock()
        self._collection(collection)[document_id] = StoredDocument(
            id=document_id,
            data=copy.deepcopy(data),
            created_at=now,
            updated_at=now,
        )

    def _set(self, collection: str, document_id: str, data: dict[str, Any], merge: bool) -> None:
        existing = self._collection(collection).get(document_id)
        if existing is None:
            self._create(collection, document_id, data)
            return
        fields = {**existing.data, **data} if merge else dict(data)
        existing.data = copy.deepcopy(fields)
        existing.updated_at = self._clock()

    def _update(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        existing = self._collection(collection).get(document_id)
        if existing is None:
            raise NotFoundError(f"{collection}/{document_id} does not exist")
        existing.data = copy.deepcopy({**existing.data, **data})
        existing.updated_at = self._clock()

    def _delete(self, collection: str, document_id: str) -> None:
        self._collection(collection).pop(document_id, None)

    # DocumentStoreInterface

    async def list_documents(self, collection: str) -> list[StoredDocument]:
        return [doc.model_copy(deep=True) for doc in self._collection(collection).values()]

    async def get_document(
        self,
        collection: str,
        document_id: str,
    ) -> Optional[StoredDocument]:
        doc = self._collection(collection).get(document_id)
        return doc.model_copy(deep=True) if doc else None

    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        document_id = new_document_id()
        async with self._lock:
            self._create(collection, document_id, data)
        return document_id

    async def set_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        async with self._lock:
            self._set(collection, document_id, data, merge)

    async def update_document(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        async with self._lock:
            self._update(collection, document_id, data)

    async def delete_document(self, collection: str, document_id: str) -> None:
        async with self._lock:
            self._delete(collection, document_id)

    async def commit_batch(self, batch: WriteBatch) -> None:
        async with self._lock:
            # Check every update target first so a failing batch applies nothing
            exists: dict[tuple[str, str], bool] = {}
            for op in batch.operations:
                key = (op.collection, op.document_id)
                if op.kind in ("create", "set"):
                    exists[key] = True
                elif op.kind == "delete":
                    exists[key] = False
                elif not exists.get(key, op.document_id in self._collection(op.collection)):
                    raise NotFoundError(f"{op.collection}/{op.document_id} does not exist")

            for op in batch.operations:
                if op.kind == "create":
                    self._create(op.collection, op.document_id, op.data)
                elif op.kind == "set":
                    self._set(op.collection, op.document_id, op.data, op.merge)
                elif op.kind == "update":
                    self._update(op.collection, op.document_id, op.data)
                else:
                    self._delete(op.collection, op.document_id)
