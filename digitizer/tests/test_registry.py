"""Tests for digitizer.core.registry module.

Tests the document type registry:
- config_for(): Total lookup over DocumentType
- Instruction overrides and schema protection
- Persistence of overrides across reloads
"""

import json

import pytest

from digitizer.core.errors import ConfigurationError, ValidationError
from digitizer.core.registry import DEFAULT_CONFIGS, DocumentTypeRegistry
from digitizer.pydantic_models import ColumnDefinition, DocumentType


# =============================================================================
# Lookup tests
# =============================================================================


class TestConfigFor:
    """Tests for registry lookups."""

    @pytest.mark.parametrize("doc_type", list(DocumentType))
    def test_every_type_has_columns(self, doc_type):
        config = DocumentTypeRegistry().config_for(doc_type)
        assert config.type is doc_type
        assert len(config.columns) > 0

    @pytest.mark.parametrize("doc_type", list(DocumentType))
    def test_column_keys_are_unique(self, doc_type):
        keys = DocumentTypeRegistry().config_for(doc_type).column_keys
        assert len(keys) == len(set(keys))

    def test_accepts_plain_string(self):
        assert DocumentTypeRegistry().config_for("PO").label == "Purchase Order"

    def test_bom_column_order(self):
        labels = [c.label for c in DocumentTypeRegistry().columns_for(DocumentType.BOM)]
        assert labels == ["Part #", "Description", "Qty", "Unit", "Notes"]

    def test_invoice_required_keys(self):
        config = DocumentTypeRegistry().config_for(DocumentType.INVOICE)
        assert config.required_keys == ["description", "total"]

    def test_other_has_no_required_keys(self):
        assert DocumentTypeRegistry().config_for(DocumentType.OTHER).required_keys == []

    def test_corrupted_entry_raises_configuration_error(self):
        registry = DocumentTypeRegistry()
        del registry._configs[DocumentType.PO]
        with pytest.raises(ConfigurationError):
            registry.config_for(DocumentType.PO)

    def test_all_configs_in_enum_order(self):
        types = [c.type for c in DocumentTypeRegistry().all_configs()]
        assert types == list(DocumentType)


# =============================================================================
# Administration tests
# =============================================================================


class TestOverrides:
    """Tests for instruction edits."""

    def test_override_changes_prompt_only(self):
        registry = DocumentTypeRegistry()
        updated = registry.override_instruction(DocumentType.BOM, "Read the revision block too.")
        assert updated.prompt == "Read the revision block too."
        assert updated.columns == DEFAULT_CONFIGS[DocumentType.BOM].columns
        assert registry.is_overridden(DocumentType.BOM)

    def test_empty_override_rejected(self):
        registry = DocumentTypeRegistry()
        with pytest.raises(ValidationError):
            registry.override_instruction(DocumentType.BOM, "   ")
        assert not registry.is_overridden(DocumentType.BOM)

    def test_update_config_with_new_prompt(self):
        registry = DocumentTypeRegistry()
        edited = registry.config_for(DocumentType.PO).with_prompt("Only read line items.")
        assert registry.update_config(edited).prompt == "Only read line items."

    def test_update_config_rejects_column_change(self):
        registry = DocumentTypeRegistry()
        config = registry.config_for(DocumentType.PO)
        edited = config.model_copy(update={
            "prompt": "new",
            "columns": config.columns + (ColumnDefinition(key="extra", label="Extra"),),
        })
        with pytest.raises(ValidationError):
            registry.update_config(edited)
        assert registry.config_for(DocumentType.PO).prompt == DEFAULT_CONFIGS[DocumentType.PO].prompt

    def test_update_config_rejects_reordered_columns(self):
        registry = DocumentTypeRegistry()
        config = registry.config_for(DocumentType.BOM)
        edited = config.model_copy(update={"columns": tuple(reversed(config.columns))})
        with pytest.raises(ValidationError):
            registry.update_config(edited)

    def test_reset_instruction_restores_default(self):
        registry = DocumentTypeRegistry()
        registry.override_instruction(DocumentType.INVOICE, "custom")
        registry.reset_instruction(DocumentType.INVOICE)
        assert registry.config_for(DocumentType.INVOICE) == DEFAULT_CONFIGS[DocumentType.INVOICE]

    def test_reset_all(self):
        registry = DocumentTypeRegistry()
        registry.override_instruction(DocumentType.BOM, "a")
        registry.override_instruction(DocumentType.OTHER, "b")
        registry.reset_all()
        assert not any(registry.is_overridden(t) for t in DocumentType)


# =============================================================================
# Persistence tests
# =============================================================================


class TestPersistence:
    """Tests for storing overrides."""

    def test_override_survives_reload(self, storage):
        DocumentTypeRegistry(storage=storage).override_instruction(DocumentType.BOM, "custom bom")
        reloaded = DocumentTypeRegistry(storage=storage)
        assert reloaded.config_for(DocumentType.BOM).prompt == "custom bom"
        assert not reloaded.is_overridden(DocumentType.PO)

    def test_only_overrides_are_stored(self, storage):
        DocumentTypeRegistry(storage=storage).override_instruction(DocumentType.PO, "custom po")
        assert json.loads(storage.get_item("doc_prompts")) == {"PO": "custom po"}

    def test_reset_is_persisted(self, storage):
        registry = DocumentTypeRegistry(storage=storage)
        registry.override_instruction(DocumentType.BOM, "custom")
        registry.reset_instruction(DocumentType.BOM)
        assert not DocumentTypeRegistry(storage=storage).is_overridden(DocumentType.BOM)

    def test_corrupt_overrides_ignored(self, storage):
        storage.set_item("doc_prompts", "{not json")
        registry = DocumentTypeRegistry(storage=storage)
        assert registry.config_for(DocumentType.BOM) == DEFAULT_CONFIGS[DocumentType.BOM]

    def test_unknown_type_ignored(self, storage):
        storage.set_item("doc_prompts", json.dumps({"RECEIPT": "x", "OTHER": "custom other"}))
        registry = DocumentTypeRegistry(storage=storage)
        assert registry.config_for(DocumentType.OTHER).prompt == "custom other"
