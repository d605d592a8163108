"""Prompts for page transcription.

Each document type has a default instruction that administrators may replace.
The consolidation directive is always appended and is not editable: it keeps
multi-page output a single table and pins the output format to the schema.
"""

from textwrap import dedent

from digitizer.pydantic_models.document_types import DocumentType


BOM_PROMPT = dedent("""\
    You are an expert industrial transcriptionist. Analyze this handwritten Bill of Materials.
    Extract: 'Part #' (partNumber), 'Description' (description), 'Qty' (quantity), 'Unit' (unit), 'Notes' (notes).
    If handwriting is messy, use engineering context. Return empty string for missing fields.""")

INVOICE_PROMPT = dedent("""\
    Analyze this invoice. Extract Vendor Name and line items into a table.
    Fields: 'Vendor' (Vendor), 'Item Code' (itemCode), 'Description' (description), 'Quantity' (quantity), 'Unit Price' (unitPrice), 'Total' (total).
    Ensure numeric values are formatted cleanly.""")

PO_PROMPT = dedent("""\
    Analyze this Purchase Order. Extract items.
    Fields: 'SKU' (sku), 'Description' (description), 'Quantity' (quantity), 'Unit Cost' (unitCost), 'Line Total' (lineTotal).""")

OTHER_PROMPT = dedent("""\
    Analyze this document and extract tabular data.
    Map columns to generic fields: col1, col2, col3, col4, notes.
    Try to map the most important identifier to col1 and description to col2.""")


DEFAULT_PROMPTS: dict[DocumentType, str] = {
    DocumentType.BOM: BOM_PROMPT,
    DocumentType.INVOICE: INVOICE_PROMPT,
    DocumentType.PO: PO_PROMPT,
    DocumentType.OTHER: OTHER_PROMPT,
}


CONSOLIDATION_DIRECTIVE = dedent("""\
    Analyze ALL provided images/pages as a single logical document. Consolidate the data into one table.
    Return the result strictly as a JSON array matching the schema provided.
    Ensure all values are strings. If a field is missing, use an empty string.""")


def build_extraction_prompt(instruction: str) -> str:
    """Combine the configured instruction with the fixed directive."""
    return f"{instruction.strip()}\n\n{CONSOLIDATION_DIRECTIVE}"
