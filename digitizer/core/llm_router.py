"""LiteLLM Router configuration for the transcription model.

Transcription is a single attempt: retries and fallbacks are disabled so a
failed call surfaces immediately and the user decides whether to try again.

Supports multiple LLM providers:
- Gemini (default): Uses GEMINI_API_KEY
- OpenRouter: Uses OPENROUTER_API_KEY
- Azure OpenAI: Uses AZURE_API_KEY, AZURE_API_BASE, AZURE_API_VERSION
"""

import os

from litellm import Router

from digitizer.core.config import (
    LLMConfig,
    api_key_env_var,
    extraction_model,
    llm_provider,
)


def _build_keyed_model_list(model: str) -> list[dict]:
    """Model list for providers that only need an API key (Gemini, OpenRouter)."""
    return [
        {
            "model_name": model,
            "litellm_params": {
                "model": model,
                "api_key": f"os.environ/{api_key_env_var()}",
            },
        },
    ]


def _build_azure_model_list(model: str) -> list[dict]:
    """Build model list for Azure OpenAI provider.

    Azure requires:
    - AZURE_API_KEY: API key
    - AZURE_API_BASE: Endpoint URL (e.g., https://your-resource.openai.azure.com/)
    - AZURE_API_VERSION: API version (e.g., 2024-02-15-preview)
    """
    return [
        {
            "model_name": model,
            "litellm_params": {
                "model": model,
                "api_key": os.environ.get("AZURE_API_KEY", ""),
                "api_base": os.environ.get("AZURE_API_BASE", ""),
                "api_version": os.environ.get("AZURE_API_VERSION", "2024-02-15-preview"),
            },
        },
    ]


def build_router(model: str | None = None) -> Router:
    """Build the Router for one transcription model, without retries."""
    model = model or extraction_model()
    if llm_provider() == "azure":
        model_list = _build_azure_model_list(model)
    else:
        model_list = _build_keyed_model_list(model)

    return Router(
        model_list=model_list,
        num_retries=LLMConfig.NUM_RETRIES,
    )


_routers: dict[str, Router] = {}


def get_router(model: str | None = None) -> Router:
    """Return the shared Router for a model, building it on first use."""
    model = model or extraction_model()
    if model not in _routers:
        _routers[model] = build_router(model)
    return _routers[model]


def reset_router() -> None:
    """Drop cached Routers (for tests and provider switches)."""
    _routers.clear()
