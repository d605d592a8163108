"""Tests for digitizer.core.errors module.

Tests the error handling infrastructure:
- DigitizerError hierarchy and categories
- Error factory functions
- Serialization for logs
"""

from digitizer.core.errors import (
    TRANSCRIPTION_FAILED_MESSAGE,
    ConfigurationError,
    DigitizerError,
    ErrorCategory,
    ExtractionError,
    PersistenceError,
    SessionStateError,
    ValidationError,
    configuration_error,
    llm_api_error,
    llm_parse_error,
    persistence_error,
    validation_error,
)


# =============================================================================
# Hierarchy tests
# =============================================================================


class TestHierarchy:
    """Tests for the error classes."""

    def test_all_are_digitizer_errors(self):
        for cls in (ValidationError, ExtractionError, ConfigurationError, PersistenceError, SessionStateError):
            assert issubclass(cls, DigitizerError)

    def test_default_categories(self):
        assert ValidationError("x").category is ErrorCategory.VALIDATION
        assert ExtractionError("x").category is ErrorCategory.LLM_API
        assert ConfigurationError("x").category is ErrorCategory.CONFIGURATION
        assert PersistenceError("x").category is ErrorCategory.PERSISTENCE
        assert SessionStateError("x").category is ErrorCategory.STATE

    def test_category_override(self):
        error = ExtractionError("x", category=ErrorCategory.LLM_PARSE)
        assert error.category is ErrorCategory.LLM_PARSE
        assert ExtractionError("y").category is ErrorCategory.LLM_API

    def test_str_is_message(self):
        assert str(ValidationError("No files selected.")) == "No files selected."

    def test_to_dict(self):
        original = OSError("disk full")
        error = PersistenceError("Could not save", original_error=original, context={"key": "bom_history"})

        d = error.to_dict()

        assert d["category"] == "persistence"
        assert d["type"] == "PersistenceError"
        assert d["message"] == "Could not save"
        assert "disk full" in d["original_error"]
        assert d["context"] == {"key": "bom_history"}


# =============================================================================
# Factory function tests
# =============================================================================


class TestFactories:
    """Tests for error factory functions."""

    def test_llm_api_error(self):
        original = TimeoutError("deadline")
        error = llm_api_error(original, model="gemini/gemini-3-pro-preview")
        assert isinstance(error, ExtractionError)
        assert error.message == TRANSCRIPTION_FAILED_MESSAGE
        assert error.original_error is original
        assert error.context == {"model": "gemini/gemini-3-pro-preview"}

    def test_llm_parse_error_truncates_raw_response(self):
        error = llm_parse_error("not an array", "x" * 2000)
        assert error.category is ErrorCategory.LLM_PARSE
        assert error.message == TRANSCRIPTION_FAILED_MESSAGE
        assert error.context["reason"] == "not an array"
        assert len(error.context["raw_response"]) == 500

    def test_llm_parse_error_without_response(self):
        assert llm_parse_error("empty").context["raw_response"] is None

    def test_validation_error(self):
        error = validation_error("Only images (JPG, PNG) and PDF files are allowed.", field_name="files")
        assert isinstance(error, ValidationError)
        assert error.context == {"field": "files"}

    def test_configuration_error(self):
        error = configuration_error("GEMINI_API_KEY environment variable is missing.", setting="GEMINI_API_KEY")
        assert isinstance(error, ConfigurationError)
        assert error.context["setting"] == "GEMINI_API_KEY"

    def test_persistence_error(self):
        error = persistence_error("doc_prompts", PermissionError("denied"))
        assert "doc_prompts" in error.message
        assert error.context == {"key": "doc_prompts"}
        assert isinstance(error.original_error, PermissionError)
