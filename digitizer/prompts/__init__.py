"""Prompt templates for the transcription model."""

from digitizer.prompts.extraction_prompt import (
    BOM_PROMPT,
    INVOICE_PROMPT,
    PO_PROMPT,
    OTHER_PROMPT,
    DEFAULT_PROMPTS,
    CONSOLIDATION_DIRECTIVE,
    build_extraction_prompt,
)

__all__ = [
    "BOM_PROMPT",
    "INVOICE_PROMPT",
    "PO_PROMPT",
    "OTHER_PROMPT",
    "DEFAULT_PROMPTS",
    "CONSOLIDATION_DIRECTIVE",
    "build_extraction_prompt",
]
