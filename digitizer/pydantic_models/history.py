"""Persisted extraction sessions.

Serialized shape matches the snapshot the browser application kept in local
storage, so old snapshots load unchanged:

    [{"id": "...", "timestamp": 1700000000000, "fileName": "scan.jpg",
      "docType": "BOM", "items": [{"id": "...", "partNumber": "100", ...}]}]
"""

import time
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from digitizer.pydantic_models.document_types import DocumentType
from digitizer.pydantic_models.items import ExtractedItem


def now_ms() -> int:
    return int(time.time() * 1000)


class HistoryItem(BaseModel):
    """One past extraction session."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: int = Field(default_factory=now_ms, description="Creation time, epoch milliseconds")
    file_name: str = Field(alias="fileName")
    doc_type: DocumentType = Field(default=DocumentType.BOM, alias="docType")
    items: list[ExtractedItem] = Field(default_factory=list)

    @field_validator("doc_type", mode="before")
    @classmethod
    def _default_missing_type(cls, value):
        # Entries saved before document types existed have no docType
        return value or DocumentType.BOM


HistorySnapshot = TypeAdapter(list[HistoryItem])
"""Validator/serializer for the whole stored history list."""
