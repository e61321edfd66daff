"""
Shared building blocks for the planner models.

Every stored entity comes in three shapes:
- <Entity>Create: the writable fields, validated at the form boundary
- <Entity>Update: the same fields, all optional, for partial updates
- <Entity>:       what comes back from the store (id + timestamps attached)
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints


def blank_to_none(value: Any) -> Any:
    """Forms send "" for untouched optional inputs; store them as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _optional_text(max_length: int):
    return Annotated[
        Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=max_length)]],
        BeforeValidator(blank_to_none),
    ]


# Optional free text; blank input is stored as absent
ShortText = _optional_text(100)
MediumText = _optional_text(500)
LongText = _optional_text(2000)


class FormModel(BaseModel):
    """Base for Create/Update models: strips whitespace, rejects unknown fields."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    def to_document(self) -> dict[str, Any]:
        """Serialize for a create: absent optionals are not written at all."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_patch(self) -> dict[str, Any]:
        """
        Serialize for a partial update.

        Only fields the caller actually set are written. An explicit None
        is kept so the stored value gets cleared.
        """
        return self.model_dump(mode="json", exclude_unset=True)


class StoredDocument(BaseModel):
    """
    A raw document as the store returns it.

    `data` holds the JSON-compatible entity fields; the identifier and the
    timestamps live outside it because the store owns them.
    """

    id: str
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoredRecord(BaseModel):
    """Fields the document store attaches to every record."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str = Field(
        ...,
        min_length=1,
        description="Store-assigned document identifier"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Assigned by the store on create"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Refreshed by the store on every write"
    )

    @classmethod
    def from_document(cls, document: StoredDocument) -> "StoredRecord":
        """Map a raw store document to a typed record with its id attached."""
        return cls.model_validate({
            **document.data,
            "id": document.id,
            "created_at": document.created_at,
            "updated_at": document.updated_at,
        })

