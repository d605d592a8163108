"""LLM client for page transcription.

Absorbs the boilerplate around a single multimodal call:
- Building the user message from inline attachments and text
- Cost tracking integration
- JSON parsing of the response text

The pattern this replaces:
    content = [{"type": "image_url", ...}, ..., {"type": "text", "text": prompt}]
    response = await router.acompletion(model=..., messages=[{"role": "user", "content": content}], ...)
    if cost_tracker: cost_tracker.record(...)
    return json.loads(response.choices[0].message.content)
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from digitizer.core.config import LLMConfig
from digitizer.core.cost_tracker import CostTracker
from digitizer.core.llm_router import get_router
from digitizer.pydantic_models.document_types import DocumentType

logger = logging.getLogger(__name__)

# Suppress LiteLLM debug noise (done once at module load)
logging.getLogger("litellm").setLevel(logging.ERROR)
logging.getLogger("httpx").setLevel(logging.ERROR)


@dataclass
class Attachment:
    """An inline file sent alongside the prompt."""

    media_type: str
    data_base64: str

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data_base64}"

    def to_content_part(self) -> dict[str, Any]:
        """LiteLLM content part: images as image_url, anything else as file."""
        if self.media_type.startswith("image/"):
            return {"type": "image_url", "image_url": {"url": self.data_url}}
        return {"type": "file", "file": {"file_data": self.data_url}}


@dataclass
class LLMResponse:
    """Parsed response from an LLM call.

    Attributes:
        content: Parsed JSON (list or dict), or None if the model returned no text.
        raw_content: Raw string content from the LLM ("" when absent).
        model: Model identifier used for the call.
    """

    content: Any
    raw_content: str
    model: str


class LLMClient:
    """Client for making multimodal LLM API calls.

    Usage:
        client = LLMClient(cost_tracker=tracker)
        response = await client.complete(
            prompt="Extract the rows...",
            attachments=[Attachment("image/png", b64)],
            model="gemini/gemini-3-pro-preview",
            response_format={"type": "json_schema", "json_schema": {...}},
            doc_type=DocumentType.BOM,
        )
        rows = response.content
    """

    def __init__(self, cost_tracker: CostTracker | None = None) -> None:
        """Initialize the client.

        Args:
            cost_tracker: Optional tracker for recording API token usage.
        """
        self.cost_tracker = cost_tracker

    async def complete(
        self,
        prompt: str,
        attachments: list[Attachment],
        model: str,
        response_format: dict[str, Any],
        doc_type: DocumentType = DocumentType.OTHER,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Send attachments followed by the prompt in one user message.

        Args:
            prompt: Instruction text, placed after the attachments.
            attachments: Inline files, in page order.
            model: LLM model identifier.
            response_format: Structured-output constraint passed to the provider.
            doc_type: Document type the pages belong to, for cost tracking.
            temperature: Sampling temperature. Defaults to LLMConfig.TEMPERATURE.

        Returns:
            LLMResponse with parsed JSON content.

        Raises:
            json.JSONDecodeError: If the response text is not valid JSON.
            litellm exceptions: For API, network and authentication errors.
        """
        content = [a.to_content_part() for a in attachments]
        content.append({"type": "text", "text": prompt})
        messages = [{"role": "user", "content": content}]

        response = await get_router(model).acompletion(
            model=model,
            messages=messages,
            response_format=response_format,
            temperature=temperature if temperature is not None else LLMConfig.TEMPERATURE,
        )

        if self.cost_tracker:
            self.cost_tracker.record(
                model, getattr(response, "usage", None), doc_type=doc_type, pages=len(attachments),
            )

        raw_content = response.choices[0].message.content or ""
        if not raw_content.strip():
            logger.debug("Empty response text")
            return LLMResponse(content=None, raw_content=raw_content, model=model)

        return LLMResponse(
            content=json.loads(raw_content),
            raw_content=raw_content,
            model=model,
        )
