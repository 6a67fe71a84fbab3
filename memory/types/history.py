"""Plan history model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from planner.execution_plan import ExecutionPlan


class HistoryItem(BaseModel):
    """One generated plan together with the prompt that produced it."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    timestamp: int
    input: str
    plan: ExecutionPlan
