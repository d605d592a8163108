"""Core services for the digitizer."""

from digitizer.core.config import (
    API_KEY_ENV_VARS,
    llm_provider,
    api_key_env_var,
    extraction_model,
    storage_home,
    LLMConfig,
    IngestionLimits,
    StorageConfig,
    ExportConfig,
)
from digitizer.core.errors import (
    ErrorCategory,
    DigitizerError,
    ValidationError,
    ExtractionError,
    ConfigurationError,
    PersistenceError,
    SessionStateError,
    llm_api_error,
    llm_parse_error,
    validation_error,
    configuration_error,
    persistence_error,
)
from digitizer.core.local_storage import LocalStorage
from digitizer.core.registry import DEFAULT_CONFIGS, DocumentTypeRegistry
from digitizer.core.ingestion import (
    validate_selection,
    ingest,
    ingest_paths,
    validate_paths,
    read_raw_files,
)
from digitizer.core.cost_tracker import CostTracker, CallUsage
from digitizer.core.llm_client import Attachment, LLMClient, LLMResponse
from digitizer.core.extraction_client import (
    ExtractionClient,
    build_response_schema,
    build_response_format,
)
from digitizer.core.history_store import HistoryStore
from digitizer.core.export import CSV_MEDIA_TYPE, export_csv, export_filename
from digitizer.core.session_logger import SessionLogger, get_logger, reset_logger

__all__ = [
    # Config
    "API_KEY_ENV_VARS",
    "llm_provider",
    "api_key_env_var",
    "extraction_model",
    "storage_home",
    "LLMConfig",
    "IngestionLimits",
    "StorageConfig",
    "ExportConfig",
    # Errors
    "ErrorCategory",
    "DigitizerError",
    "ValidationError",
    "ExtractionError",
    "ConfigurationError",
    "PersistenceError",
    "SessionStateError",
    "llm_api_error",
    "llm_parse_error",
    "validation_error",
    "configuration_error",
    "persistence_error",
    # Registry and storage
    "LocalStorage",
    "DEFAULT_CONFIGS",
    "DocumentTypeRegistry",
    "HistoryStore",
    # Ingestion
    "validate_selection",
    "ingest",
    "ingest_paths",
    "validate_paths",
    "read_raw_files",
    # Extraction
    "CostTracker",
    "CallUsage",
    "Attachment",
    "LLMClient",
    "LLMResponse",
    "ExtractionClient",
    "build_response_schema",
    "build_response_format",
    # Export
    "CSV_MEDIA_TYPE",
    "export_csv",
    "export_filename",
    # Logging
    "SessionLogger",
    "get_logger",
    "reset_logger",
]
