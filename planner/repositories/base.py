"""
Collection Repository Base

One repository per entity collection. All of them share the same
contract:

    list()              every record, in the collection's fixed order
    get(id)             one record, or None if it doesn't exist
    create(data)        store stamps timestamps, returns the new id
    update(id, fields)  merge fields, store refreshes updated_at
    delete(id)          remove unconditionally

Repositories don't validate beyond the pydantic models they are handed
and don't retry. Store errors are logged and re-raised unchanged so the
calling page decides what to show.

Collections whose records carry cross-field rules (an expense's paid
amount, an event's end time) set validate_merged: an update is then
checked against the stored record with the patch applied, and rejected
before anything is written.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, ClassVar, Generic, Iterator, Optional, TypeVar, Union

import structlog

from planner.log import get_logger
from planner.models.common import FormModel, StoredDocument, StoredRecord
from planner.services.storage import DocumentStoreInterface, NotFoundError


RecordT = TypeVar("RecordT", bound=StoredRecord)
CreateT = TypeVar("CreateT", bound=FormModel)
UpdateT = TypeVar("UpdateT", bound=FormModel)


@contextmanager
def logged_failure(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    **context: Any,
) -> Iterator[None]:
    """Log a failed store call with its context, then let it propagate."""
    try:
        yield
    except Exception as e:
        logger.error(
            f"{operation}_failed",
            error=str(e),
            error_type=type(e).__name__,
            **context,
        )
        raise


def merge_patch(record: StoredRecord, patch: dict[str, Any]) -> StoredRecord:
    """
    The record as it would read back after the patch is stored.

    Raises:
        ValidationError: If the merged record breaks one of its model's rules
    """
    return type(record).model_validate({**record.model_dump(), **patch})


class CollectionRepository(Generic[RecordT, CreateT, UpdateT]):
    """
    CRUD over one collection of the document store.

    Subclasses set the collection name, the three models and the
    ordering used by list().
    """

    collection: ClassVar[str]
    record_model: ClassVar[type[StoredRecord]]
    create_model: ClassVar[type[FormModel]]
    update_model: ClassVar[type[FormModel]]

    order_by: ClassVar[str] = "created_at"
    descending: ClassVar[bool] = True

    # Check updates against the stored record before writing
    validate_merged: ClassVar[bool] = False

    def __init__(self, store: DocumentStoreInterface):
        self._store = store
        self._logger = get_logger(__name__).bind(collection=self.collection)

    def _logged(self, operation: str, **context: Any):
        return logged_failure(self._logger, operation, **context)

    def _to_record(self, document: StoredDocument) -> RecordT:
        return self.record_model.from_document(document)

    def _sort_key(self, record: RecordT) -> tuple:
        value = getattr(record, self.order_by)
        # Records missing the sort field go last in either direction
        present = value is not None
        return (present, value) if self.descending else (not present, value)

    def _sorted(self, records: list[RecordT]) -> list[RecordT]:
        return sorted(records, key=self._sort_key, reverse=self.descending)

    @staticmethod
    def _coerce(model: type[FormModel], data: Union[FormModel, dict]) -> FormModel:
        if isinstance(data, model):
            return data
        if isinstance(data, FormModel):
            data = data.model_dump(exclude_unset=True)
        return model.model_validate(data)

    async def _check_merged(self, record_id: str, patch: dict[str, Any]) -> None:
        current = await self.get(record_id)
        if current is None:
            raise NotFoundError(f"{self.collection}/{record_id} does not exist")
        try:
            merge_patch(current, patch)
        except ValueError as e:
            self._logger.warning(
                "update_rejected",
                record_id=record_id,
                fields=sorted(patch),
                error=str(e),
            )
            raise

    async def list(self) -> list[RecordT]:
        """Every record in the collection, in this collection's order."""
        with self._logged("list"):
            documents = await self._store.list_documents(self.collection)
        return self._sorted([self._to_record(doc) for doc in documents])

    async def get(self, record_id: str) -> Optional[RecordT]:
        """One record, or None when it doesn't exist."""
        with self._logged("get", record_id=record_id):
            document = await self._store.get_document(self.collection, record_id)
        if document is None:
            return None
        return self._to_record(document)

    async def create(self, data: Union[CreateT, dict]) -> str:
        """Store a new record and return its id."""
        payload = self._coerce(self.create_model, data).to_document()
        with self._logged("create"):
            record_id = await self._store.add_document(self.collection, payload)
        self._logger.info("record_created", record_id=record_id)
        return record_id

    async def update(self, record_id: str, updates: Union[UpdateT, dict]) -> None:
        """
        Merge the given fields into a record.

        Raises:
            NotFoundError: If the record doesn't exist
            ValidationError: If validate_merged is set and the merged
                record breaks a cross-field rule
        """
        patch = self._coerce(self.update_model, updates).to_patch()
        if self.validate_merged:
            await self._check_merged(record_id, patch)
        with self._logged("update", record_id=record_id):
            await self._store.update_document(self.collection, record_id, patch)
        self._logger.info("record_updated", record_id=record_id, fields=sorted(patch))

    async def delete(self, record_id: str) -> None:
        """Remove a record. Missing records are ignored."""
        with self._logged("delete", record_id=record_id):
            await self._store.delete_document(self.collection, record_id)
        self._logger.info("record_deleted", record_id=record_id)
