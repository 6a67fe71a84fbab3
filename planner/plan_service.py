"""Plan generation, refinement and brainstorming over a text-generation backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from llm.base_llm import BaseLLM
from planner.execution_plan import ExecutionPlan
from planner.plan_parser import parse_execution_plan
from planner.prompts import (
    BRAINSTORM_SYSTEM_INSTRUCTION,
    PLANNING_SYSTEM_INSTRUCTION,
    build_refine_prompt,
)

logger = logging.getLogger("cp.plan_service")


@dataclass(frozen=True)
class PlannerSettings:
    """Model identifiers and sampling temperatures per operation."""

    plan_model: str = "gemini-3-pro-preview"
    brainstorm_model: str = "gemini-3-flash-preview"
    plan_temperature: float = 0.1
    refine_temperature: float = 0.2
    brainstorm_temperature: float = 0.7

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> PlannerSettings:
        """Build settings from the ``models.planner`` config section."""
        planner_cfg = config.get("models", {}).get("planner", {})
        defaults = cls()
        return cls(
            plan_model=str(planner_cfg.get("plan_model", defaults.plan_model)),
            brainstorm_model=str(planner_cfg.get("brainstorm_model", defaults.brainstorm_model)),
            plan_temperature=float(planner_cfg.get("plan_temperature", defaults.plan_temperature)),
            refine_temperature=float(
                planner_cfg.get("refine_temperature", defaults.refine_temperature)
            ),
            brainstorm_temperature=float(
                planner_cfg.get("brainstorm_temperature", defaults.brainstorm_temperature)
            ),
        )


class PlanService:
    """Single round-trip operations against the configured LLM.

    Backend failures propagate as ``LLMError``; nothing is retried.
    """

    def __init__(self, llm: BaseLLM, settings: PlannerSettings | None = None) -> None:
        self.llm = llm
        self.settings = settings or PlannerSettings()

    def generate_plan(self, user_input: str) -> ExecutionPlan:
        """Turn free-form input into a structured plan."""
        text = self.llm.generate(
            user_input,
            model=self.settings.plan_model,
            system_instruction=PLANNING_SYSTEM_INSTRUCTION,
            temperature=self.settings.plan_temperature,
        )
        plan = parse_execution_plan(text)
        logger.info("Generated plan with %d steps", len(plan.steps))
        return plan

    def refine_plan(self, prior_raw_markdown: str, instruction: str) -> ExecutionPlan:
        """Re-plan from the previous markdown plus a modification instruction."""
        text = self.llm.generate(
            build_refine_prompt(prior_raw_markdown, instruction),
            model=self.settings.plan_model,
            system_instruction=PLANNING_SYSTEM_INSTRUCTION,
            temperature=self.settings.refine_temperature,
        )
        plan = parse_execution_plan(text)
        logger.info("Refined plan now has %d steps", len(plan.steps))
        return plan

    def brainstorm(self, user_input: str) -> str:
        """Return unparsed high-temperature ideas."""
        return self.llm.generate(
            user_input,
            model=self.settings.brainstorm_model,
            system_instruction=BRAINSTORM_SYSTEM_INSTRUCTION,
            temperature=self.settings.brainstorm_temperature,
        )
