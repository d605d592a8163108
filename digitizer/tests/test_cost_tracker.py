"""Tests for digitizer.core.cost_tracker module."""

from unittest.mock import MagicMock, patch

import pytest

from digitizer.core.cost_tracker import CallUsage, CostTracker
from digitizer.pydantic_models import DocumentType


def _usage(prompt_tokens: int, completion_tokens: int) -> MagicMock:
    return MagicMock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)


class TestCallUsage:

    @pytest.mark.parametrize("model", ["gemini/gemini-2.5-flash", "openrouter/google/gemini-2.5-flash"])
    def test_fallback_pricing(self, model):
        call = CallUsage(model, DocumentType.BOM, 1, prompt_tokens=1_000_000, completion_tokens=1_000_000)
        with patch("litellm.completion_cost", side_effect=Exception("unknown model")):
            assert call.cost == pytest.approx(2.80)

    def test_unknown_model_costs_zero(self):
        call = CallUsage("local/mystery", DocumentType.BOM, 1, prompt_tokens=10, completion_tokens=10)
        with patch("litellm.completion_cost", side_effect=Exception("unknown model")):
            assert call.cost == 0.0


class TestCostTracker:

    def test_record_usage(self):
        tracker = CostTracker()
        tracker.record("gemini/x", _usage(10, 5), DocumentType.BOM, pages=2)
        tracker.record("gemini/x", _usage(20, 0), "PO", pages=1)

        assert tracker.call_count == 2
        assert tracker.total_tokens == 35
        assert tracker.calls[1].doc_type is DocumentType.PO

    def test_missing_usage_not_recorded(self):
        tracker = CostTracker()
        assert tracker.record("gemini/x", None, DocumentType.BOM, pages=1) is None
        assert tracker.call_count == 0

    def test_by_doc_type(self):
        tracker = CostTracker()
        with patch("litellm.completion_cost", return_value=0.03):
            tracker.record("gemini/x", _usage(10, 5), DocumentType.BOM, pages=3)
            tracker.record("gemini/x", _usage(10, 5), DocumentType.BOM, pages=1)
            tracker.record("gemini/x", _usage(1, 1), DocumentType.INVOICE, pages=1)
            breakdown = tracker.by_doc_type()

        bom = breakdown[DocumentType.BOM]
        assert (bom.calls, bom.pages, bom.tokens) == (2, 4, 30)
        assert bom.cost_per_page == pytest.approx(0.015)
        assert breakdown[DocumentType.INVOICE].calls == 1
        assert DocumentType.PO not in breakdown

    def test_summary(self):
        tracker = CostTracker()
        with patch("litellm.completion_cost", return_value=0.5):
            tracker.record("gemini/x", _usage(1000, 200), DocumentType.INVOICE, pages=2)
            summary = tracker.summary()

        assert "Total API calls: 1" in summary
        assert "Total tokens: 1,200" in summary
        assert "INVOICE: 1 calls, 2 pages, 1,200 tokens, $0.5000 ($0.2500/page)" in summary
