"""Execution plan models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OBJECTIVE_NOT_FOUND = "Objective not found"
ACTION_NOT_FOUND = "Action not found"


class ExecutionPlan(BaseModel):
    """Structured plan parsed from model markdown.

    ``raw_markdown`` is the unmodified source text; the other fields are a
    best-effort parse and may hold the ``*_NOT_FOUND`` sentinels.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    objective: str = OBJECTIVE_NOT_FOUND
    steps: list[str] = Field(default_factory=list)
    first_action: str = ACTION_NOT_FOUND
    common_mistakes: list[str] = Field(default_factory=list)
    raw_markdown: str = ""
