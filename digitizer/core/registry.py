"""Document type registry.

Maps each DocumentType to its label, extraction instruction, and ordered
columns. Columns are fixed: administrators may change the instruction text of
any type but never its schema, so exported CSVs keep the same layout.

Usage:
    registry = DocumentTypeRegistry(storage=LocalStorage("~/.digitizer"))
    config = registry.config_for(DocumentType.BOM)
    registry.override_instruction(DocumentType.BOM, "Also read the revision block.")
    registry.reset_instruction(DocumentType.BOM)
"""

import json
import logging

from digitizer.core.config import StorageConfig
from digitizer.core.errors import (
    PersistenceError,
    configuration_error,
    validation_error,
)
from digitizer.core.local_storage import LocalStorage
from digitizer.prompts.extraction_prompt import DEFAULT_PROMPTS
from digitizer.pydantic_models.document_types import (
    ColumnDefinition,
    DocTypeConfig,
    DocumentType,
)

logger = logging.getLogger(__name__)


def _col(key: str, label: str, min_width: int, required: bool = False) -> ColumnDefinition:
    return ColumnDefinition(key=key, label=label, min_width=min_width, required=required)


DEFAULT_CONFIGS: dict[DocumentType, DocTypeConfig] = {
    DocumentType.BOM: DocTypeConfig(
        type=DocumentType.BOM,
        label="Bill of Materials",
        prompt=DEFAULT_PROMPTS[DocumentType.BOM],
        columns=(
            _col("partNumber", "Part #", 120, required=True),
            _col("description", "Description", 250, required=True),
            _col("quantity", "Qty", 70, required=True),
            _col("unit", "Unit", 70),
            _col("notes", "Notes", 200),
        ),
    ),
    DocumentType.INVOICE: DocTypeConfig(
        type=DocumentType.INVOICE,
        label="Invoice",
        prompt=DEFAULT_PROMPTS[DocumentType.INVOICE],
        columns=(
            _col("Vendor", "Vendor", 120),
            _col("itemCode", "Item Code", 120),
            _col("description", "Description", 250, required=True),
            _col("quantity", "Qty", 80),
            _col("unitPrice", "Unit Price", 100),
            _col("total", "Total", 100, required=True),
        ),
    ),
    DocumentType.PO: DocTypeConfig(
        type=DocumentType.PO,
        label="Purchase Order",
        prompt=DEFAULT_PROMPTS[DocumentType.PO],
        columns=(
            _col("sku", "SKU", 120),
            _col("description", "Description", 250, required=True),
            _col("quantity", "Qty", 80, required=True),
            _col("unitCost", "Unit Cost", 100),
            _col("lineTotal", "Total", 100, required=True),
        ),
    ),
    DocumentType.OTHER: DocTypeConfig(
        type=DocumentType.OTHER,
        label="Other Document",
        prompt=DEFAULT_PROMPTS[DocumentType.OTHER],
        columns=(
            _col("col1", "Column 1", 120),
            _col("col2", "Column 2", 150),
            _col("col3", "Column 3", 120),
            _col("col4", "Column 4", 120),
            _col("notes", "Notes", 200),
        ),
    ),
}


class DocumentTypeRegistry:
    """Per-type configuration with editable instructions.

    If a LocalStorage is given, instruction overrides are persisted under
    StorageConfig.PROMPTS_KEY and re-applied on construction.
    """

    def __init__(
        self,
        storage: LocalStorage | None = None,
        key: str = StorageConfig.PROMPTS_KEY,
    ) -> None:
        self._storage = storage
        self._key = key
        self._configs: dict[DocumentType, DocTypeConfig] = dict(DEFAULT_CONFIGS)
        if storage is not None:
            self._load_overrides()

    # Lookups

    def config_for(self, doc_type: DocumentType) -> DocTypeConfig:
        """Return the current config for a document type.

        Raises:
            ConfigurationError: If the registry has no valid entry for the type.
        """
        doc_type = DocumentType(doc_type)
        match doc_type:
            case DocumentType.BOM | DocumentType.INVOICE | DocumentType.PO | DocumentType.OTHER:
                config = self._configs.get(doc_type)
            case _:
                config = None
        if config is None or config.type is not doc_type or not config.columns:
            raise configuration_error(
                f"Document type registry is missing a valid entry for {doc_type}",
                setting=str(doc_type),
            )
        return config

    def columns_for(self, doc_type: DocumentType) -> tuple[ColumnDefinition, ...]:
        return self.config_for(doc_type).columns

    def label_for(self, doc_type: DocumentType) -> str:
        return self.config_for(doc_type).label

    def all_configs(self) -> list[DocTypeConfig]:
        return [self.config_for(t) for t in DocumentType]

    def is_overridden(self, doc_type: DocumentType) -> bool:
        return self.config_for(doc_type).prompt != DEFAULT_CONFIGS[doc_type].prompt

    # Administration

    def override_instruction(self, doc_type: DocumentType, prompt: str) -> DocTypeConfig:
        """Replace the instruction text of one type. Columns are untouched.

        Raises:
            ValidationError: If the prompt is empty.
        """
        doc_type = DocumentType(doc_type)
        if not prompt or not prompt.strip():
            raise validation_error("Instruction text cannot be empty.", field_name="prompt")
        self._configs[doc_type] = self.config_for(doc_type).with_prompt(prompt)
        self._save_overrides()
        logger.info(f"Instruction for {doc_type} updated")
        return self._configs[doc_type]

    def update_config(self, config: DocTypeConfig) -> DocTypeConfig:
        """Apply an edited config, accepting only instruction changes.

        Raises:
            ValidationError: If the label or columns differ from the defaults.
        """
        default = DEFAULT_CONFIGS[config.type]
        if config.columns != default.columns:
            raise validation_error(
                f"Columns for {config.type} are fixed and cannot be changed.",
                field_name="columns",
            )
        if config.label != default.label:
            raise validation_error(
                f"Label for {config.type} cannot be changed.",
                field_name="label",
            )
        return self.override_instruction(config.type, config.prompt)

    def reset_instruction(self, doc_type: DocumentType) -> DocTypeConfig:
        """Restore the default instruction for one type."""
        doc_type = DocumentType(doc_type)
        self._configs[doc_type] = DEFAULT_CONFIGS[doc_type]
        self._save_overrides()
        return self._configs[doc_type]

    def reset_all(self) -> None:
        """Restore every default instruction."""
        self._configs = dict(DEFAULT_CONFIGS)
        self._save_overrides()

    # Persistence

    def _overrides(self) -> dict[str, str]:
        return {
            t.value: c.prompt
            for t, c in self._configs.items()
            if c.prompt != DEFAULT_CONFIGS[t].prompt
        }

    def _save_overrides(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(self._key, json.dumps(self._overrides(), indent=2))
        except PersistenceError as e:
            logger.error(f"Could not save instruction overrides: {e.original_error or e}")

    def _load_overrides(self) -> None:
        try:
            raw = self._storage.get_item(self._key)
            data = json.loads(raw) if raw else {}
        except (PersistenceError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring stored instruction overrides: {e}")
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring stored instruction overrides: not an object")
            return

        for type_name, prompt in data.items():
            try:
                doc_type = DocumentType(type_name)
            except ValueError:
                logger.warning(f"Ignoring override for unknown document type '{type_name}'")
                continue
            if isinstance(prompt, str) and prompt.strip():
                self._configs[doc_type] = DEFAULT_CONFIGS[doc_type].with_prompt(prompt)

