"""Extraction client: pages in, typed rows out.

Sends every page of a document in one call together with the document type's
JSON schema and instructions, then turns the returned JSON array into
ExtractedItems with client-assigned ids.

A call is a single attempt. Any provider, network, authentication, or parse
failure becomes an ExtractionError with a user-facing message; nothing
partially parsed is ever returned.
"""

import json
import logging
import os
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from digitizer.core.config import LLMConfig, api_key_env_var, extraction_model
from digitizer.core.cost_tracker import CostTracker
from digitizer.core.errors import (
    ExtractionError,
    configuration_error,
    llm_api_error,
    llm_parse_error,
)
from digitizer.core.llm_client import Attachment, LLMClient
from digitizer.core.registry import DEFAULT_CONFIGS
from digitizer.prompts.extraction_prompt import build_extraction_prompt
from digitizer.pydantic_models.document_types import ColumnDefinition, DocumentType
from digitizer.pydantic_models.items import ExtractedItem, row_model_for
from digitizer.pydantic_models.session_models import FilePayload

logger = logging.getLogger(__name__)


def build_response_schema(columns: Sequence[ColumnDefinition]) -> dict[str, Any]:
    """JSON schema for an array of rows whose fields are all text."""
    item_schema: dict[str, Any] = {
        "type": "object",
        "properties": {c.key: {"type": "string"} for c in columns},
    }
    required = [c.key for c in columns if c.required]
    if required:
        item_schema["required"] = required
    return {"type": "array", "items": item_schema}


def build_response_format(columns: Sequence[ColumnDefinition]) -> dict[str, Any]:
    """LiteLLM response_format requesting schema-constrained JSON only."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": LLMConfig.SCHEMA_NAME,
            "schema": build_response_schema(columns),
        },
    }


def _rows_from_content(content: Any, raw_content: str) -> list[dict]:
    """Accept a JSON array of objects, or an object wrapping it under "items"."""
    if isinstance(content, dict) and isinstance(content.get("items"), list):
        content = content["items"]
    if not isinstance(content, list):
        raise llm_parse_error("response is not a JSON array", raw_content)
    if not all(isinstance(row, dict) for row in content):
        raise llm_parse_error("array elements are not objects", raw_content)
    return content


def to_items(doc_type: DocumentType, rows: list[dict]) -> list[ExtractedItem]:
    """Validate rows through the type's row variant and assign ids.

    Missing schema fields become "", extra fields are kept.
    """
    row_model = row_model_for(doc_type)
    return [ExtractedItem.from_row(row_model.model_validate(row)) for row in rows]


class ExtractionClient:
    """Transcribes document pages through the AI collaborator.

    Usage:
        client = ExtractionClient(cost_tracker=CostTracker())
        items = await client.transcribe(payloads, DocumentType.BOM, config.prompt)
    """

    def __init__(
        self,
        model: str | None = None,
        cost_tracker: CostTracker | None = None,
        llm_client: LLMClient | None = None,
    ) -> None:
        self.model = model or extraction_model()
        self.llm = llm_client or LLMClient(cost_tracker=cost_tracker)

    @property
    def cost_tracker(self) -> CostTracker | None:
        return self.llm.cost_tracker

    def _check_credentials(self) -> None:
        key_var = api_key_env_var()
        if not os.environ.get(key_var):
            raise configuration_error(
                f"{key_var} environment variable is missing.",
                setting=key_var,
            )

    async def transcribe(
        self,
        payloads: Sequence[FilePayload],
        doc_type: DocumentType,
        instruction: str,
        columns: Sequence[ColumnDefinition] | None = None,
    ) -> list[ExtractedItem]:
        """Transcribe pages into rows, in the order the model returns them.

        Args:
            payloads: Ingested pages, in page order.
            doc_type: Document type; selects the row variant.
            instruction: Configured prompt for the type.
            columns: Columns that define the response schema. Defaults to
                the registry columns of doc_type, which never change.

        Returns:
            ExtractedItems with fresh ids. Empty if the model returned no text.

        Raises:
            ConfigurationError: If the API key is not configured.
            ExtractionError: On any provider or parse failure.
        """
        doc_type = DocumentType(doc_type)
        self._check_credentials()
        if columns is None:
            columns = DEFAULT_CONFIGS[doc_type].columns

        attachments = [Attachment(p.media_type, p.data_base64) for p in payloads]
        try:
            response = await self.llm.complete(
                prompt=build_extraction_prompt(instruction),
                attachments=attachments,
                model=self.model,
                response_format=build_response_format(columns),
                doc_type=doc_type,
            )
        except json.JSONDecodeError as e:
            logger.error(f"Transcription response is not JSON: {e}")
            raise llm_parse_error(str(e), e.doc) from e
        except Exception as e:
            logger.error(f"Transcription call failed: {type(e).__name__}: {e}")
            raise llm_api_error(e, model=self.model) from e

        if response.content is None:
            logger.info(f"Model returned no text for {len(payloads)} {doc_type} page(s)")
            return []

        try:
            rows = _rows_from_content(response.content, response.raw_content)
        except ExtractionError as e:
            logger.error(f"Unusable transcription response: {e.context.get('reason')}")
            raise

        try:
            items = to_items(doc_type, rows)
        except PydanticValidationError as e:
            raise llm_parse_error(f"rows do not fit the schema: {e}", response.raw_content) from e
        logger.info(f"Transcribed {len(items)} row(s) from {len(payloads)} {doc_type} page(s)")
        return items
