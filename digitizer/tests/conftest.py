"""Pytest configuration and shared fixtures.

Provides reusable test fixtures for:
- Temporary local storage, registry and history
- Sample selected files (PNG, PDF, unsupported)
- Mock LLM router responses
- A scripted extraction client for session tests
"""

import base64
import json

import fitz
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from digitizer.core.config import api_key_env_var
from digitizer.core.errors import llm_api_error
from digitizer.core.history_store import HistoryStore
from digitizer.core.local_storage import LocalStorage
from digitizer.core.registry import DocumentTypeRegistry
from digitizer.core.session_logger import reset_logger
from digitizer.pydantic_models import ExtractedItem, RawFile


# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

BOM_ROW = {"partNumber": "100", "description": "Bolt", "quantity": "5", "unit": "ea", "notes": ""}


# =============================================================================
# Storage
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_global_logger():
    yield
    reset_logger()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "store")


@pytest.fixture
def registry(storage):
    return DocumentTypeRegistry(storage=storage)


@pytest.fixture
def history(storage):
    return HistoryStore(storage).load()


# =============================================================================
# Selected files
# =============================================================================


@pytest.fixture
def png_file():
    return RawFile(name="page1.png", media_type="image/png", data=PNG_BYTES)


@pytest.fixture
def pdf_bytes():
    doc = fitz.open()
    page = doc.new_page(width=200, height=200)
    page.insert_text((20, 40), "Part # 100 Bolt 5 ea")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_file(pdf_bytes):
    return RawFile(name="scan.pdf", media_type="application/pdf", data=pdf_bytes)


@pytest.fixture
def text_file():
    return RawFile(name="notes.txt", media_type="text/plain", data=b"hello")


# =============================================================================
# Mock LLM router
# =============================================================================


def make_completion(content: str | None, prompt_tokens: int = 100, completion_tokens: int = 50):
    """Build an object shaped like a litellm ModelResponse."""
    return MagicMock(
        choices=[MagicMock(message=MagicMock(content=content))],
        usage=MagicMock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


@pytest.fixture
def completion():
    """Factory for fake router responses."""
    return make_completion


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv(api_key_env_var(), "test-key")


@pytest.fixture
def mock_router(api_key):
    """Patch the router used by LLMClient; default reply is one BOM row."""
    with patch("digitizer.core.llm_client.get_router") as get_router:
        router = MagicMock()
        router.acompletion = AsyncMock(return_value=make_completion(json.dumps([BOM_ROW])))
        get_router.return_value = router
        yield router


# =============================================================================
# Scripted extraction client
# =============================================================================


class ScriptedExtractionClient:
    """Stands in for ExtractionClient in session tests.

    Returns `rows` as fresh ExtractedItems, or raises `error` if set.
    """

    def __init__(self, rows: list[dict] | None = None, error: Exception | None = None):
        self.rows = rows if rows is not None else [BOM_ROW]
        self.error = error
        self.calls: list[dict] = []

    async def transcribe(self, payloads, doc_type, instruction, columns=None):
        self.calls.append({
            "payloads": list(payloads),
            "doc_type": doc_type,
            "instruction": instruction,
            "columns": columns,
        })
        if self.error is not None:
            raise self.error
        return [ExtractedItem(fields=dict(row)) for row in self.rows]


@pytest.fixture
def bom_row():
    return dict(BOM_ROW)


@pytest.fixture
def client_factory():
    """Build a ScriptedExtractionClient with custom rows or error."""
    return ScriptedExtractionClient


@pytest.fixture
def scripted_client():
    return ScriptedExtractionClient()


@pytest.fixture
def failing_client():
    return ScriptedExtractionClient(error=llm_api_error(RuntimeError("503 Service Unavailable")))
