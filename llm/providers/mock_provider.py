"""Deterministic local fallback LLM provider for offline usage."""

from __future__ import annotations

import re
from collections import Counter

from llm.base_llm import BaseLLM


class MockProvider(BaseLLM):
    """Rule-based responder that mimics the planning and brainstorm formats."""

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        return [token for token in re.split(r"[^a-zA-Z0-9]+", text.lower()) if token]

    @staticmethod
    def _salient(tokens: list[str], max_items: int = 6) -> list[str]:
        top = Counter(token for token in tokens if len(token) > 3).most_common(max_items)
        return [term for term, _ in top]

    @staticmethod
    def _split_goal(text: str) -> list[str]:
        parts = [
            p.strip() for p in re.split(r"\band\b|,|;|\n", text, flags=re.IGNORECASE) if p.strip()
        ]
        return parts[:7] or [text.strip() or "Clarify the goal"]

    def _plan(self, contents: str) -> str:
        if "REFINEMENT INSTRUCTION:" in contents:
            original, _, instruction = contents.partition("REFINEMENT INSTRUCTION:")
            goal = original.replace("ORIGINAL PLAN:", "").strip().splitlines()
            objective = goal[1].strip() if len(goal) > 1 else "Refined plan"
            instruction = instruction.split("Apply this instruction")[0].strip()
            parts = [objective, f"Apply: {instruction}"]
        else:
            parts = self._split_goal(contents)
            objective = parts[0]
        steps = "\n".join(f"{idx}. {part}" for idx, part in enumerate(parts, start=1))
        return (
            f"## Objective\n{objective}\n\n"
            f"## Step-by-Step Plan\n{steps}\n\n"
            f"## First Action to Take\n{parts[0]}\n\n"
            "## Common Mistakes to Avoid\n"
            "- Starting without a deadline\n"
            "- Skipping the first small step\n"
            "- Planning instead of doing\n"
        )

    def _brainstorm(self, contents: str) -> str:
        terms = self._salient(self._tokenize(contents)) or ["idea"]
        return "\n".join(f"- Explore {term}" for term in terms)

    def generate(
        self,
        contents: str,
        *,
        model: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        """Generate deterministic text shaped by the system instruction."""
        _ = (model, temperature)
        if "## Objective" in system_instruction:
            return self._plan(contents)
        return self._brainstorm(contents)
