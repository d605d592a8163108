"""Document types and their table structure.

A DocTypeConfig ties a DocumentType to the label shown to the user, the
instruction sent to the model, and the ordered columns of the resulting table.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, Enum):
    """Closed set of supported extraction categories."""

    BOM = "BOM"
    INVOICE = "INVOICE"
    PO = "PO"
    OTHER = "OTHER"

    def __str__(self) -> str:
        return self.value


class ColumnDefinition(BaseModel):
    """One table column.

    The key is the stable identifier used in ExtractedItem.fields and in the
    model's response schema. Order within DocTypeConfig.columns defines both
    table and export order.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    min_width: int = Field(default=100, ge=0)
    required: bool = Field(
        default=False,
        description="Listed as required in the structured-output schema",
    )


class DocTypeConfig(BaseModel):
    """Everything needed to extract and display one document type."""

    model_config = ConfigDict(frozen=True)

    type: DocumentType
    label: str
    prompt: str
    columns: tuple[ColumnDefinition, ...]

    @property
    def column_keys(self) -> list[str]:
        return [c.key for c in self.columns]

    @property
    def required_keys(self) -> list[str]:
        return [c.key for c in self.columns if c.required]

    def with_prompt(self, prompt: str) -> "DocTypeConfig":
        """Copy of this config with only the instruction text replaced."""
        return self.model_copy(update={"prompt": prompt})
