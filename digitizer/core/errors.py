"""Structured error types for the digitizer.

Provides typed errors for:
- Selection and schema validation
- LLM API and parse failures
- Missing configuration
- Local storage failures
- Actions the current session state does not allow
"""

from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of digitizer errors."""
    VALIDATION = "validation"         # Bad selection, schema edit, empty export
    LLM_API = "llm_api"               # Provider/network/auth errors
    LLM_PARSE = "llm_parse"           # Response text is not the expected JSON
    CONFIGURATION = "configuration"   # Missing credential or corrupted registry
    PERSISTENCE = "persistence"       # Local storage read/write errors
    STATE = "state"                   # Action not permitted in current state


class DigitizerError(Exception):
    """Base error carrying a user-facing message and its category."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        context: dict[str, Any] | None = None,
        category: ErrorCategory | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        if category is not None:
            self.category = category

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "category": self.category.value,
            "type": type(self).__name__,
            "message": self.message,
            "original_error": repr(self.original_error) if self.original_error else None,
            "context": self.context,
        }


class ValidationError(DigitizerError):
    """User input that must be corrected before anything happens."""

    category = ErrorCategory.VALIDATION


class ExtractionError(DigitizerError):
    """The AI collaborator failed or answered with something unusable."""

    category = ErrorCategory.LLM_API


class ConfigurationError(DigitizerError):
    """Missing credential or broken document type registry."""

    category = ErrorCategory.CONFIGURATION


class PersistenceError(DigitizerError):
    """Local storage could not be read or written."""

    category = ErrorCategory.PERSISTENCE


class SessionStateError(DigitizerError):
    """The session is in a state that does not permit the action."""

    category = ErrorCategory.STATE


# Factory functions for common error types

TRANSCRIPTION_FAILED_MESSAGE = (
    "Failed to transcribe the documents. Please ensure the images are clear."
)


def llm_api_error(original: Exception | None = None, model: str | None = None) -> ExtractionError:
    """Create an error for a failed provider call."""
    return ExtractionError(
        TRANSCRIPTION_FAILED_MESSAGE,
        original_error=original,
        context={"model": model} if model else {},
    )


def llm_parse_error(reason: str, raw_response: str | None = None) -> ExtractionError:
    """Create an error for a response that is not a JSON array of objects."""
    return ExtractionError(
        TRANSCRIPTION_FAILED_MESSAGE,
        context={
            "reason": reason,
            "raw_response": raw_response[:500] if raw_response else None,
        },
        category=ErrorCategory.LLM_PARSE,
    )


def validation_error(message: str, field_name: str | None = None) -> ValidationError:
    """Create a validation error."""
    return ValidationError(message, context={"field": field_name} if field_name else {})


def configuration_error(message: str, setting: str | None = None) -> ConfigurationError:
    """Create a configuration error."""
    return ConfigurationError(message, context={"setting": setting} if setting else {})


def persistence_error(key: str, original: Exception | None = None) -> PersistenceError:
    """Create a storage error for a key."""
    return PersistenceError(
        f"Could not access stored data for '{key}'",
        original_error=original,
        context={"key": key},
    )
