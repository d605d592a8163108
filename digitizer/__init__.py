"""Document digitizer.

Turns up to three scanned or handwritten pages of a Bill of Materials,
Invoice, Purchase Order, or other tabular document into editable rows via a
multimodal LLM, keeps a local history of past sessions, and exports CSV.

Architecture:
    core/             - Registry, ingestion, LLM client, history, export, logging
    prompts/          - Default extraction instructions
    pydantic_models/  - Document types, rows, history and session models
    session.py        - Workflow state machine

Usage:
    from digitizer import DigitizationSession, DocumentType

    session = DigitizationSession(registry, history, ExtractionClient())
    await session.select_files(raw_files, DocumentType.BOM)

CLI:
    digitize extract --type BOM scans/page1.jpg scans/page2.jpg
"""

from digitizer.session import DigitizationSession
from digitizer.pydantic_models import (
    DocumentType,
    ColumnDefinition,
    DocTypeConfig,
    ExtractedItem,
    HistoryItem,
    ProcessingState,
    ProcessingStatus,
    RawFile,
    FilePayload,
    CsvExport,
)

__all__ = [
    # Main entry point
    "DigitizationSession",
    # Models
    "DocumentType",
    "ColumnDefinition",
    "DocTypeConfig",
    "ExtractedItem",
    "HistoryItem",
    "ProcessingState",
    "ProcessingStatus",
    "RawFile",
    "FilePayload",
    "CsvExport",
]
