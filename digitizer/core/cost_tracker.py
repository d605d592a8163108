"""Token and cost tracking for transcription calls.

Every call transcribes the pages of one document type, so usage is grouped
per document type and reported per page as well as per call.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from digitizer.pydantic_models.document_types import DocumentType

logger = logging.getLogger(__name__)

# Fallback pricing per 1M tokens (USD) when litellm lookup fails.
_FALLBACK_PRICING: dict[str, tuple[float, float]] = {
    # (input_cost_per_1M, output_cost_per_1M)
    "gemini-3-pro-preview": (2.00, 12.00),
    "gemini-2.5-pro": (1.25, 10.00),
    "gemini-2.5-flash": (0.30, 2.50),
    "gpt-4o": (2.50, 10.00),
}

_warned_models: set[str] = set()


def _fallback_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    # 'openrouter/google/gemini-2.5-pro' and 'gemini/gemini-2.5-pro' share one price
    rates = _FALLBACK_PRICING.get(model.rsplit("/", 1)[-1])
    if rates is None:
        return 0.0
    return (prompt_tokens * rates[0] + completion_tokens * rates[1]) / 1_000_000


@dataclass
class CallUsage:
    """Usage for one transcription call."""

    model: str
    doc_type: DocumentType
    pages: int
    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    @property
    def cost(self) -> float:
        """Cost in USD from litellm's pricing database, else the fallback table."""
        try:
            from litellm import completion_cost
            return completion_cost(
                model=self.model,
                prompt_tokens=self.prompt_tokens,
                completion_tokens=self.completion_tokens,
            )
        except Exception:
            fallback = _fallback_cost(self.model, self.prompt_tokens, self.completion_tokens)
            if fallback == 0.0 and self.model not in _warned_models:
                _warned_models.add(self.model)
                logger.warning(f"No pricing available for model '{self.model}', cost will show as $0")
            return fallback


@dataclass
class DocTypeUsage:
    """Usage of all calls for one document type."""

    calls: int = 0
    pages: int = 0
    tokens: int = 0
    cost: float = 0.0

    @property
    def cost_per_page(self) -> float:
        return self.cost / self.pages if self.pages else 0.0


@dataclass
class CostTracker:
    """Accumulates token usage and costs across transcription calls."""

    calls: list[CallUsage] = field(default_factory=list)

    def record(self, model: str, usage: Any, doc_type: DocumentType, pages: int) -> CallUsage | None:
        """Record the usage object of a LiteLLM response.

        Responses without usage are not recorded and return None.
        """
        if usage is None:
            return None
        call = CallUsage(
            model=model,
            doc_type=DocumentType(doc_type),
            pages=pages,
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )
        self.calls.append(call)
        return call

    @property
    def total_prompt_tokens(self) -> int:
        return sum(c.prompt_tokens for c in self.calls)

    @property
    def total_completion_tokens(self) -> int:
        return sum(c.completion_tokens for c in self.calls)

    @property
    def total_tokens(self) -> int:
        return self.total_prompt_tokens + self.total_completion_tokens

    @property
    def total_cost(self) -> float:
        return sum(c.cost for c in self.calls)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def by_doc_type(self) -> dict[DocumentType, DocTypeUsage]:
        breakdown: dict[DocumentType, DocTypeUsage] = {}
        for call in self.calls:
            usage = breakdown.setdefault(call.doc_type, DocTypeUsage())
            usage.calls += 1
            usage.pages += call.pages
            usage.tokens += call.total_tokens
            usage.cost += call.cost
        return breakdown

    def summary(self) -> str:
        """Return a formatted summary of usage and costs."""
        lines = [
            "=" * 50,
            "COST SUMMARY",
            "=" * 50,
            f"Total API calls: {self.call_count}",
            f"Total tokens: {self.total_tokens:,}",
            f"  - Prompt: {self.total_prompt_tokens:,}",
            f"  - Completion: {self.total_completion_tokens:,}",
            f"Total cost: ${self.total_cost:.4f}",
            "",
            "By document type:",
        ]
        for doc_type, usage in sorted(self.by_doc_type().items()):
            lines.append(
                f"  {doc_type}: {usage.calls} calls, {usage.pages} pages, "
                f"{usage.tokens:,} tokens, ${usage.cost:.4f} (${usage.cost_per_page:.4f}/page)"
            )
        lines.append("=" * 50)
        return "\n".join(lines)
