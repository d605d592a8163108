"""Centralized configuration for the document digitizer.

All limits, defaults, and provider settings live here. Each constant
documents what it controls and what reads it.
"""

import os
from pathlib import Path
from typing import Final


# =============================================================================
# LLM Provider Configuration
# =============================================================================
#
# To switch providers, set the LLM_PROVIDER environment variable:
#   - "gemini" (default): Google AI Studio via GEMINI_API_KEY
#   - "openrouter": OpenRouter API gateway via OPENROUTER_API_KEY
#   - "azure": Azure OpenAI Service
#
# For Azure, also set:
#   - AZURE_API_KEY: Your Azure OpenAI API key
#   - AZURE_API_BASE: Your Azure endpoint (e.g., https://your-resource.openai.azure.com/)
#   - AZURE_API_VERSION: API version (e.g., 2024-02-15-preview)
#   - AZURE_DEPLOYMENT: Deployment name of a vision-capable model (default: gpt-4o)
#
# =============================================================================

# Provider settings are read from the environment on every call.

API_KEY_ENV_VARS: Final[dict[str, str]] = {
    "gemini": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "azure": "AZURE_API_KEY",
}


def llm_provider() -> str:
    """LLM provider to use. Set via LLM_PROVIDER env var."""
    return os.environ.get("LLM_PROVIDER", "gemini")


def api_key_env_var() -> str:
    """Environment variable name for the LLM API key (provider-dependent)."""
    return API_KEY_ENV_VARS.get(llm_provider(), "GEMINI_API_KEY")


def _default_model() -> str:
    """Provider-specific identifier of the transcription model."""
    provider = llm_provider()
    if provider == "azure":
        return f"azure/{os.environ.get('AZURE_DEPLOYMENT', 'gpt-4o')}"
    if provider == "openrouter":
        return "openrouter/google/gemini-3-pro-preview"
    return "gemini/gemini-3-pro-preview"


def extraction_model() -> str:
    """Model used to transcribe pages into rows.

    Must accept image and PDF attachments. Override with DIGITIZER_MODEL.
    """
    return os.environ.get("DIGITIZER_MODEL") or _default_model()


class LLMConfig:
    """Default parameters for the transcription call."""

    TEMPERATURE: Final[float] = 0.1
    """Low randomness so repeated runs on the same pages agree."""

    NUM_RETRIES: Final[int] = 0
    """One attempt per call. The user retries manually from the error state."""

    SCHEMA_NAME: Final[str] = "extracted_rows"
    """Name given to the JSON schema in the response_format payload."""


# =============================================================================
# File Ingestion
# =============================================================================

class IngestionLimits:
    """Constraints applied to a file selection before anything is read."""

    MAX_FILES: Final[int] = 3
    """Pages per extraction. More than this rejects the whole selection."""

    IMAGE_PREFIX: Final[str] = "image/"
    """Any media type with this prefix is accepted."""

    PDF_MEDIA_TYPE: Final[str] = "application/pdf"

    PDF_PREVIEW_ZOOM: Final[float] = 1.0
    """Zoom factor for the page-1 PNG preview of a PDF.

    Used by: ingestion.py:_pdf_preview()
    """


# =============================================================================
# Local Storage
# =============================================================================

class StorageConfig:
    """Where durable state is kept and under which keys."""

    HISTORY_KEY: Final[str] = "bom_history"
    """Key of the history snapshot. Same key the browser app used."""

    PROMPTS_KEY: Final[str] = "doc_prompts"
    """Key of the per-type prompt overrides."""


def storage_home() -> Path:
    """Directory holding one JSON file per storage key. Set via DIGITIZER_HOME."""
    return Path(os.environ.get("DIGITIZER_HOME") or Path.home() / ".digitizer")


# =============================================================================
# Export
# =============================================================================

class ExportConfig:
    """CSV export settings."""

    MEDIA_TYPE: Final[str] = "text/csv;charset=utf-8"

    ENCODING: Final[str] = "utf-8"

    FILENAME_PATTERN: Final[str] = "{doc_type}_Export_{date}.csv"
    """Used by: export.py:export_filename()"""

    OUTPUT_DIR: Final[str] = "outputs"
    """Default CLI output directory for CSV files."""
