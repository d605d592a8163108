"""Pydantic models for the digitizer.

Modules:
- document_types: DocumentType, ColumnDefinition, DocTypeConfig
- items: ExtractedItem and the per-type row variants
- history: HistoryItem and the snapshot adapter
- session_models: ProcessingState, RawFile, FilePayload, CsvExport
"""

from digitizer.pydantic_models.document_types import (
    DocumentType,
    ColumnDefinition,
    DocTypeConfig,
)
from digitizer.pydantic_models.items import (
    ExtractedItem,
    BomRow,
    InvoiceRow,
    PoRow,
    OtherRow,
    row_model_for,
    as_text,
)
from digitizer.pydantic_models.history import HistoryItem, HistorySnapshot
from digitizer.pydantic_models.session_models import (
    ProcessingStatus,
    ProcessingState,
    RawFile,
    FilePayload,
    CsvExport,
)

__all__ = [
    # Document types
    "DocumentType",
    "ColumnDefinition",
    "DocTypeConfig",
    # Rows
    "ExtractedItem",
    "BomRow",
    "InvoiceRow",
    "PoRow",
    "OtherRow",
    "row_model_for",
    "as_text",
    # History
    "HistoryItem",
    "HistorySnapshot",
    # Session
    "ProcessingStatus",
    "ProcessingState",
    "RawFile",
    "FilePayload",
    "CsvExport",
]
