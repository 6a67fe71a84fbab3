"""LLM provider factory."""

from __future__ import annotations

from typing import Any

from llm.base_llm import BaseLLM
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.mock_provider import MockProvider


def build_llm(config: dict[str, Any]) -> BaseLLM:
    """Build an LLM provider from configuration, defaulting to Gemini."""
    models_cfg = config.get("models", {}).get("llm", {})
    active = models_cfg.get("active_provider", "gemini")
    providers = models_cfg.get("providers", {})
    active_cfg = providers.get(active, {})
    provider_type = active_cfg.get("type", active)

    if provider_type == "mock":
        return MockProvider()
    if provider_type != "gemini":
        raise ValueError(f"Unknown LLM provider type: {provider_type}")
    return GeminiProvider(api_key=active_cfg.get("api_key"))
