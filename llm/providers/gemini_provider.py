"""Google Gemini LLM provider.

Uses the google-genai SDK to call Gemini models. Each call is a single
round-trip: there is no retry, backoff or streaming. Any SDK failure is
re-raised as ``LLMError`` so callers see one opaque error type.
"""

from __future__ import annotations

import logging
import os

from google import genai
from google.genai import types

from llm.base_llm import BaseLLM, LLMError

logger = logging.getLogger("cp.llm.gemini")

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def resolve_api_key(env_vars: tuple[str, ...] = API_KEY_ENV_VARS) -> str | None:
    """Return the first non-empty API key found in the environment."""
    for name in env_vars:
        value = os.getenv(name)
        if value:
            return value
    return None


class GeminiProvider(BaseLLM):
    """Google Gemini API adapter."""

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = api_key
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            api_key = self._api_key or resolve_api_key()
            if not api_key:
                raise LLMError(
                    "Gemini provider unavailable: GEMINI_API_KEY not set. "
                    "Export an API key or switch to the mock provider."
                )
            self._client = genai.Client(api_key=api_key)
        return self._client

    def generate(
        self,
        contents: str,
        *,
        model: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        client = self._get_client()
        logger.debug("Gemini request model=%s temperature=%.2f", model, temperature)
        try:
            response = client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=temperature,
                ),
            )
        except Exception as exc:
            logger.error("Gemini call failed: %s", exc)
            raise LLMError(str(exc) or exc.__class__.__name__) from exc
        return response.text or ""
