"""Transient UI state for the plan/brainstorm front-end."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from planner.execution_plan import ExecutionPlan

COPY_FEEDBACK_SECONDS = 2.0


class Mode(str, Enum):
    PLAN = "plan"
    BRAINSTORM = "brainstorm"


class Phase(str, Enum):
    """User-visible interaction phase derived from ``UIState``."""

    IDLE = "idle"
    GENERATING = "generating"
    PLAN_DISPLAYED = "plan_displayed"
    REFINING = "refining"
    BRAINSTORMING = "brainstorming"
    BRAINSTORM_DISPLAYED = "brainstorm_displayed"


@dataclass
class UIState:
    """Mutable, non-persisted state for a single session."""

    mode: Mode = Mode.PLAN
    input: str = ""
    refine_input: str = ""
    is_loading: bool = False
    is_refining: bool = False
    error: str | None = None
    current_plan: ExecutionPlan | None = None
    brainstorm_result: str | None = None
    copied_at: float | None = None

    @property
    def phase(self) -> Phase:
        if self.is_loading:
            return Phase.GENERATING if self.mode is Mode.PLAN else Phase.BRAINSTORMING
        if self.is_refining:
            return Phase.REFINING
        if self.mode is Mode.PLAN and self.current_plan is not None:
            return Phase.PLAN_DISPLAYED
        if self.mode is Mode.BRAINSTORM and self.brainstorm_result is not None:
            return Phase.BRAINSTORM_DISPLAYED
        return Phase.IDLE

    def is_copied(self, now: float) -> bool:
        """True while copy feedback should still be shown."""
        return self.copied_at is not None and now - self.copied_at < COPY_FEEDBACK_SECONDS
