"""Base LLM interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLMError(RuntimeError):
    """Raised when the text-generation backend cannot produce a response."""


class BaseLLM(ABC):
    """Abstract text-generation provider interface."""

    @abstractmethod
    def generate(
        self,
        contents: str,
        *,
        model: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        """Return response text for a single prompt.

        Implementations raise ``LLMError`` on transport, auth or quota
        failures. An empty response is returned as ``""``.
        """
