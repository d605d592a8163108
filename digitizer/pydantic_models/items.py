"""Extracted rows.

Two views of a row exist:

- Row variants (BomRow, InvoiceRow, PoRow, OtherRow): fixed-field models, one
  per DocumentType, used at the model boundary to validate and fill in what
  the AI collaborator returned.
- ExtractedItem: the flat, editable record held in the active set and in
  history. Serializes as {"id": ..., <column key>: <text>, ...}.
"""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from digitizer.pydantic_models.document_types import DocumentType


def as_text(value: Any) -> str:
    """Coerce a model-supplied value to the string form every cell uses."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def new_item_id() -> str:
    return str(uuid4())


# =============================================================================
# Row variants (one per document type)
# =============================================================================


class _RowBase(BaseModel):
    """Shared behaviour: every field is text, absent fields are empty, extra
    keys from the model are kept."""

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _coerce_to_text(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {str(k): as_text(v) for k, v in data.items() if k != "id"}

    def as_fields(self) -> dict[str, str]:
        """Declared fields first in declaration order, then any extras."""
        return {k: as_text(v) for k, v in self.model_dump().items()}


class BomRow(_RowBase):
    partNumber: str = ""
    description: str = ""
    quantity: str = ""
    unit: str = ""
    notes: str = ""


class InvoiceRow(_RowBase):
    Vendor: str = ""
    itemCode: str = ""
    description: str = ""
    quantity: str = ""
    unitPrice: str = ""
    total: str = ""


class PoRow(_RowBase):
    sku: str = ""
    description: str = ""
    quantity: str = ""
    unitCost: str = ""
    lineTotal: str = ""


class OtherRow(_RowBase):
    col1: str = ""
    col2: str = ""
    col3: str = ""
    col4: str = ""
    notes: str = ""


def row_model_for(doc_type: DocumentType) -> type[_RowBase]:
    """Row variant for a document type."""
    match doc_type:
        case DocumentType.BOM:
            return BomRow
        case DocumentType.INVOICE:
            return InvoiceRow
        case DocumentType.PO:
            return PoRow
        case DocumentType.OTHER:
            return OtherRow
    raise ValueError(f"Unknown document type: {doc_type!r}")


# =============================================================================
# Active / persisted record
# =============================================================================


class ExtractedItem(BaseModel):
    """One editable row: a client-assigned id plus column key -> text."""

    id: str = Field(default_factory=new_item_id)
    fields: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_flat(cls, data: Any) -> Any:
        # Stored rows are flat: {"id": "...", "partNumber": "...", ...}
        if not isinstance(data, dict):
            return data
        if set(data) <= {"id", "fields"} and isinstance(data.get("fields"), dict):
            return data
        flat = dict(data)
        item_id = flat.pop("id", None)
        result: dict[str, Any] = {"fields": {str(k): as_text(v) for k, v in flat.items()}}
        if item_id:
            result["id"] = str(item_id)
        return result

    @model_serializer
    def _to_flat(self) -> dict[str, str]:
        return {"id": self.id, **self.fields}

    @classmethod
    def from_row(cls, row: _RowBase) -> "ExtractedItem":
        """Wrap a validated row variant with a freshly generated id."""
        return cls(id=new_item_id(), fields=row.as_fields())

    def get(self, key: str, default: str = "") -> str:
        return self.fields.get(key, default)

    def with_field(self, key: str, value: str) -> "ExtractedItem":
        """Copy with one field replaced."""
        return ExtractedItem(id=self.id, fields={**self.fields, key: as_text(value)})
