"""CSV export of the active record set.

Layout:
- Header: column labels in configured order, quoted only when needed.
- Rows: every value quoted, embedded quotes doubled, missing keys empty.
- Lines joined with "\\n", no trailing newline.

Same items and columns always give byte-identical output.
"""

import csv
import io
from datetime import date
from typing import Sequence

from digitizer.core.config import ExportConfig
from digitizer.pydantic_models.document_types import ColumnDefinition, DocumentType
from digitizer.pydantic_models.items import ExtractedItem

CSV_MEDIA_TYPE = ExportConfig.MEDIA_TYPE


def export_csv(items: Sequence[ExtractedItem], columns: Sequence[ColumnDefinition]) -> bytes:
    """Serialize items as CSV in column order."""
    buffer = io.StringIO()
    header = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    rows = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    header.writerow([c.label for c in columns])
    for item in items:
        rows.writerow([item.get(c.key) for c in columns])

    text = buffer.getvalue()
    if text.endswith("\n"):
        text = text[:-1]
    return text.encode(ExportConfig.ENCODING)


def export_filename(doc_type: DocumentType, on: date | None = None) -> str:
    """<TYPE>_Export_<YYYY-MM-DD>.csv"""
    on = on or date.today()
    return ExportConfig.FILENAME_PATTERN.format(doc_type=DocumentType(doc_type).value, date=on.isoformat())
