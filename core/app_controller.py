"""Application state controller: user input → plan service → displayed result.

Owns three collections: plan history (newest first, bounded), the task
checklist (newest first, unbounded) and the transient ``UIState``. History and
task mutations are announced on the event bus, where ``PlanStorage`` rewrites
the matching blob.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from core.event_bus import HISTORY_CHANGED, TASKS_CHANGED, EventBus
from core.state_manager import Mode, UIState
from memory.plan_storage import PlanStorage
from memory.types import HistoryItem, Task
from planner.plan_parser import strip_ordinal
from planner.plan_service import PlanService

logger = logging.getLogger("cp.controller")

DEFAULT_HISTORY_LIMIT = 20
GENERIC_ERROR = "An unexpected error occurred. Please try again."

Clipboard = Callable[[str], None]
Clock = Callable[[], float]


def _error_text(exc: Exception) -> str:
    return str(exc) or GENERIC_ERROR


class AppController:
    """Single-threaded state container for one front-end session."""

    def __init__(
        self,
        plan_service: PlanService,
        storage: PlanStorage,
        event_bus: EventBus | None = None,
        clipboard: Clipboard | None = None,
        clock: Clock = time.time,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.plan_service = plan_service
        self.storage = storage
        self.event_bus = event_bus or EventBus()
        self.clipboard = clipboard
        self.clock = clock
        self.history_limit = history_limit
        self.state = UIState()

        self.event_bus.subscribe(HISTORY_CHANGED, storage.on_history_changed)
        self.event_bus.subscribe(TASKS_CHANGED, storage.on_tasks_changed)

        self.history: list[HistoryItem] = storage.load_history()[:history_limit]
        self.tasks: list[Task] = storage.load_tasks()
        logger.debug("Loaded %d history items and %d tasks", len(self.history), len(self.tasks))

    # ── ids / timestamps ─────────────────────────────────────────────

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _new_id(self, taken: set[str]) -> str:
        base = str(self._now_ms())
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    # ── persisted collections ────────────────────────────────────────

    def _set_history(self, history: list[HistoryItem]) -> None:
        self.history = history[: self.history_limit]
        self.event_bus.emit(HISTORY_CHANGED, {"history": self.history})

    def _set_tasks(self, tasks: list[Task]) -> None:
        self.tasks = tasks
        self.event_bus.emit(TASKS_CHANGED, {"tasks": self.tasks})

    # ── requests ─────────────────────────────────────────────────────

    @property
    def copied(self) -> bool:
        return self.state.is_copied(self.clock())

    def set_mode(self, mode: Mode | str) -> None:
        self.state.mode = Mode(mode)

    def submit(self, text: str | None = None) -> bool:
        """Generate a plan or brainstorm from the current input.

        Returns ``False`` when the submission is rejected: blank input or a
        request already in flight.
        """
        state = self.state
        if text is not None:
            state.input = text
        if not state.input.strip() or state.is_loading:
            return False

        state.is_loading = True
        state.error = None
        state.brainstorm_result = None
        try:
            if state.mode is Mode.PLAN:
                plan = self.plan_service.generate_plan(state.input)
                state.current_plan = plan
                now = self._now_ms()
                item = HistoryItem(
                    id=self._new_id({h.id for h in self.history}),
                    timestamp=now,
                    input=state.input,
                    plan=plan,
                )
                self._set_history([item, *self.history])
            else:
                state.brainstorm_result = self.plan_service.brainstorm(state.input)
        except Exception as exc:
            logger.warning("Request failed: %s", exc)
            state.error = _error_text(exc)
        finally:
            state.is_loading = False
        return True

    def refine(self, instruction: str | None = None) -> bool:
        """Replace the current plan with a refined one; history is untouched."""
        state = self.state
        if instruction is not None:
            state.refine_input = instruction
        if not state.refine_input.strip() or state.current_plan is None or state.is_refining:
            return False

        state.is_refining = True
        state.error = None
        try:
            state.current_plan = self.plan_service.refine_plan(
                state.current_plan.raw_markdown, state.refine_input
            )
            state.refine_input = ""
        except Exception as exc:
            logger.warning("Refinement failed: %s", exc)
            state.error = f"Refinement failed: {exc}"
        finally:
            state.is_refining = False
        return True

    def load_from_history(self, item: HistoryItem | str) -> HistoryItem | None:
        """Show a past plan and its prompt again."""
        if isinstance(item, str):
            item = next((h for h in self.history if h.id == item), None)
            if item is None:
                return None
        self.state.input = item.input
        self.state.current_plan = item.plan
        self.state.mode = Mode.PLAN
        return item

    def recent_history(self, limit: int = 5) -> list[HistoryItem]:
        return self.history[:limit]

    # ── checklist ────────────────────────────────────────────────────

    def add_task(self, text: str) -> Task | None:
        """Add a checklist item; returns ``None`` when the text already exists."""
        clean_text = strip_ordinal(text)
        if any(task.text == clean_text for task in self.tasks):
            return None
        now = self._now_ms()
        task = Task(
            id=self._new_id({t.id for t in self.tasks}),
            text=clean_text,
            completed=False,
            created_at=now,
        )
        self._set_tasks([task, *self.tasks])
        return task

    def toggle_task(self, task_id: str) -> None:
        self._set_tasks(
            [
                task.model_copy(update={"completed": not task.completed}) if task.id == task_id else task
                for task in self.tasks
            ]
        )

    def remove_task(self, task_id: str) -> None:
        self._set_tasks([task for task in self.tasks if task.id != task_id])

    def clear_completed(self) -> None:
        self._set_tasks([task for task in self.tasks if not task.completed])

    def task_progress(self) -> tuple[int, int]:
        """Return ``(completed, total)``."""
        return sum(1 for task in self.tasks if task.completed), len(self.tasks)

    # ── clipboard ────────────────────────────────────────────────────

    def _copy(self, text: str) -> bool:
        if self.clipboard is None:
            self.state.error = "Copy failed: no clipboard available"
            return False
        try:
            self.clipboard(text)
        except Exception as exc:
            logger.warning("Clipboard write failed: %s", exc)
            self.state.error = f"Copy failed: {exc}"
            return False
        self.state.error = None
        self.state.copied_at = self.clock()
        return True

    def copy_plan(self) -> bool:
        if self.state.current_plan is None:
            return False
        return self._copy(self.state.current_plan.raw_markdown)

    def copy_brainstorm(self) -> bool:
        if not self.state.brainstorm_result:
            return False
        return self._copy(self.state.brainstorm_result)
