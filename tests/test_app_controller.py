"""Application state controller tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

from core.app_controller import GENERIC_ERROR, AppController
from core.event_bus import EventBus
from core.state_manager import Mode, Phase
from llm.base_llm import BaseLLM, LLMError
from memory.plan_storage import HISTORY_KEY, TASKS_KEY, PlanStorage
from memory.stores.cache import InMemoryStore
from planner.plan_service import PlanService

PLAN_MARKDOWN = (
    "## Objective\nShip v1\n\n"
    "## Step-by-Step Plan\n1. Write spec\n2. Build\n\n"
    "## First Action to Take\nOutline spec\n\n"
    "## Common Mistakes to Avoid\n- Skipping tests\n"
)


class ScriptedLLM(BaseLLM):
    """Returns queued responses; an exception in the queue is raised."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[str] = []

    def generate(self, contents: str, **kwargs: Any) -> str:
        self.calls.append(contents)
        response = self.responses.pop(0) if self.responses else PLAN_MARKDOWN
        if isinstance(response, Exception):
            raise response
        return response


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 0.001
        return self.now


def build_controller(
    llm: BaseLLM | None = None,
    store: InMemoryStore | None = None,
    clipboard: Any = None,
    clock: FakeClock | None = None,
    history_limit: int = 20,
) -> AppController:
    storage = PlanStorage(store or InMemoryStore())
    return AppController(
        plan_service=PlanService(llm or ScriptedLLM()),
        storage=storage,
        event_bus=EventBus(),
        clipboard=clipboard,
        clock=clock or FakeClock(),
        history_limit=history_limit,
    )


def test_submit_plan_sets_current_plan_and_history() -> None:
    store = InMemoryStore()
    controller = build_controller(store=store)

    assert controller.state.phase is Phase.IDLE
    assert controller.submit("ship my product") is True

    plan = controller.state.current_plan
    assert plan is not None and plan.objective == "Ship v1"
    assert controller.state.phase is Phase.PLAN_DISPLAYED
    assert len(controller.history) == 1
    assert controller.history[0].input == "ship my product"
    assert controller.history[0].plan == plan

    saved = json.loads(store.get(HISTORY_KEY) or "[]")
    assert saved[0]["input"] == "ship my product"
    assert saved[0]["plan"]["firstAction"] == "Outline spec"
    assert saved[0]["plan"]["rawMarkdown"] == PLAN_MARKDOWN


def test_blank_or_in_flight_submission_is_rejected() -> None:
    llm = ScriptedLLM()
    controller = build_controller(llm=llm)

    assert controller.submit("   ") is False
    controller.state.is_loading = True
    assert controller.submit("real input") is False
    assert llm.calls == []


def test_loading_flag_is_set_during_request() -> None:
    seen: list[Phase] = []
    controller = build_controller()
    original = controller.plan_service.generate_plan

    def spy(text: str) -> Any:
        seen.append(controller.state.phase)
        return original(text)

    controller.plan_service.generate_plan = spy  # type: ignore[method-assign]
    controller.submit("go")

    assert seen == [Phase.GENERATING]
    assert controller.state.is_loading is False


def test_failed_submit_returns_to_idle_with_error() -> None:
    controller = build_controller(llm=ScriptedLLM(LLMError("network down")))

    controller.submit("plan this")

    assert controller.state.error == "network down"
    assert controller.state.is_loading is False
    assert controller.state.phase is Phase.IDLE
    assert controller.history == []


def test_error_without_message_uses_generic_text_and_next_success_clears_it() -> None:
    controller = build_controller(llm=ScriptedLLM(LLMError(), PLAN_MARKDOWN))

    controller.submit("first")
    assert controller.state.error == GENERIC_ERROR

    controller.submit("second")
    assert controller.state.error is None
    assert controller.state.current_plan is not None


def test_history_is_bounded_newest_first() -> None:
    controller = build_controller()

    for idx in range(21):
        controller.submit(f"plan {idx}")

    assert len(controller.history) == 20
    assert controller.history[0].input == "plan 20"
    assert controller.history[-1].input == "plan 1"
    assert all(item.input != "plan 0" for item in controller.history)


def test_refine_replaces_current_plan_only() -> None:
    refined = PLAN_MARKDOWN.replace("Ship v1", "Ship v2")
    llm = ScriptedLLM(PLAN_MARKDOWN, refined)
    controller = build_controller(llm=llm)
    controller.submit("ship")

    assert controller.refine("aim for v2") is True

    assert controller.state.current_plan is not None
    assert controller.state.current_plan.objective == "Ship v2"
    assert controller.state.refine_input == ""
    assert len(controller.history) == 1
    assert controller.history[0].plan.objective == "Ship v1"
    assert PLAN_MARKDOWN in llm.calls[1]


def test_refine_guards() -> None:
    llm = ScriptedLLM()
    controller = build_controller(llm=llm)

    assert controller.refine("more detail") is False  # no plan yet
    controller.submit("ship")
    assert controller.refine("  ") is False
    controller.state.is_refining = True
    assert controller.refine("more detail") is False
    assert len(llm.calls) == 1


def test_refine_failure_keeps_plan_and_reports() -> None:
    controller = build_controller(llm=ScriptedLLM(PLAN_MARKDOWN, LLMError("timeout")))
    controller.submit("ship")

    controller.refine("shorter")

    assert controller.state.error == "Refinement failed: timeout"
    assert controller.state.current_plan is not None
    assert controller.state.current_plan.objective == "Ship v1"
    assert controller.state.refine_input == "shorter"
    assert controller.state.is_refining is False


def test_brainstorm_mode_returns_raw_text_without_history() -> None:
    controller = build_controller(llm=ScriptedLLM("- a\n- b"))
    controller.set_mode(Mode.BRAINSTORM)

    controller.submit("ideas")

    assert controller.state.brainstorm_result == "- a\n- b"
    assert controller.state.phase is Phase.BRAINSTORM_DISPLAYED
    assert controller.history == []


def test_submit_clears_previous_brainstorm_result() -> None:
    controller = build_controller(llm=ScriptedLLM("- a", LLMError("boom")))
    controller.set_mode("brainstorm")
    controller.submit("ideas")
    controller.submit("more ideas")

    assert controller.state.brainstorm_result is None
    assert controller.state.error == "boom"


def test_add_task_strips_ordinal_and_deduplicates() -> None:
    store = InMemoryStore()
    controller = build_controller(store=store)

    first = controller.add_task("1. Write spec")
    second = controller.add_task("2. Write spec")

    assert first is not None and first.text == "Write spec"
    assert second is None
    assert len(controller.tasks) == 1
    saved = json.loads(store.get(TASKS_KEY) or "[]")
    assert saved == [
        {"id": first.id, "text": "Write spec", "completed": False, "createdAt": first.created_at}
    ]


def test_new_tasks_are_prepended_with_distinct_ids() -> None:
    clock = MagicMock(return_value=1_700_000_000.0)
    controller = build_controller(clock=clock)

    a = controller.add_task("A")
    b = controller.add_task("B")

    assert [t.text for t in controller.tasks] == ["B", "A"]
    assert a is not None and b is not None
    assert a.id != b.id


def test_toggle_twice_restores_state_and_remove_deletes_one() -> None:
    controller = build_controller()
    a = controller.add_task("A")
    b = controller.add_task("B")
    assert a is not None and b is not None

    controller.toggle_task(a.id)
    assert controller.tasks[1].completed is True
    controller.toggle_task(a.id)
    assert controller.tasks[1].completed is False

    controller.remove_task(a.id)
    assert [t.id for t in controller.tasks] == [b.id]


def test_clear_completed_filters_done_tasks() -> None:
    controller = build_controller()
    a = controller.add_task("A")
    controller.add_task("B")
    assert a is not None
    controller.toggle_task(a.id)

    assert controller.task_progress() == (1, 2)
    controller.clear_completed()

    assert [t.text for t in controller.tasks] == ["B"]
    assert controller.task_progress() == (0, 1)


def test_collections_reload_from_store() -> None:
    store = InMemoryStore()
    first = build_controller(store=store)
    first.submit("ship")
    task = first.add_task("Outline spec")
    assert task is not None

    second = build_controller(store=store)

    assert second.history == first.history
    assert second.tasks == first.tasks
    assert second.state.current_plan is None


def test_load_from_history_restores_input_and_plan() -> None:
    controller = build_controller()
    controller.submit("ship")
    item_id = controller.history[0].id
    controller.set_mode(Mode.BRAINSTORM)
    controller.state.input = "something else"

    item = controller.load_from_history(item_id)

    assert item is not None
    assert controller.state.mode is Mode.PLAN
    assert controller.state.input == "ship"
    assert controller.state.current_plan == item.plan
    assert controller.load_from_history("missing") is None


def test_copy_plan_writes_raw_markdown_and_flag_expires() -> None:
    clipboard = MagicMock()
    clock = FakeClock()
    controller = build_controller(clipboard=clipboard, clock=clock)
    assert controller.copy_plan() is False

    controller.submit("ship")
    assert controller.copy_plan() is True

    clipboard.assert_called_once_with(PLAN_MARKDOWN)
    assert controller.copied is True
    clock.now += 2.5
    assert controller.copied is False


def test_copy_brainstorm_and_clipboard_failure() -> None:
    clipboard = MagicMock(side_effect=RuntimeError("no display"))
    controller = build_controller(llm=ScriptedLLM("- idea"), clipboard=clipboard)
    controller.set_mode(Mode.BRAINSTORM)
    controller.submit("ideas")

    assert controller.copy_brainstorm() is False
    clipboard.assert_called_once_with("- idea")
    assert controller.state.error == "Copy failed: no display"
    assert controller.copied is False


def test_mutations_emit_events() -> None:
    controller = build_controller()
    seen: list[str] = []
    controller.event_bus.subscribe("tasks.changed", lambda payload: seen.append("tasks"))
    controller.event_bus.subscribe("history.changed", lambda payload: seen.append("history"))

    controller.submit("ship")
    task = controller.add_task("x")
    assert task is not None
    controller.toggle_task(task.id)
    controller.clear_completed()

    assert seen == ["history", "tasks", "tasks", "tasks"]


def test_refining_phase_is_set_during_refinement() -> None:
    seen: list[Phase] = []
    controller = build_controller()
    controller.submit("ship")
    original = controller.plan_service.refine_plan

    def spy(markdown: str, instruction: str) -> Any:
        seen.append(controller.state.phase)
        assert controller.state.is_refining is True
        return original(markdown, instruction)

    controller.plan_service.refine_plan = spy  # type: ignore[method-assign]
    controller.refine("tighter")

    assert seen == [Phase.REFINING]
    assert controller.state.is_refining is False
    assert controller.state.phase is Phase.PLAN_DISPLAYED


def test_brainstorming_phase_is_set_during_request() -> None:
    seen: list[Phase] = []
    controller = build_controller(llm=ScriptedLLM("- idea"))
    controller.set_mode(Mode.BRAINSTORM)
    original = controller.plan_service.brainstorm

    def spy(text: str) -> str:
        seen.append(controller.state.phase)
        return original(text)

    controller.plan_service.brainstorm = spy  # type: ignore[method-assign]
    controller.submit("ideas")

    assert seen == [Phase.BRAINSTORMING]
    assert controller.state.is_loading is False
    assert controller.state.phase is Phase.BRAINSTORM_DISPLAYED


def test_successful_copy_clears_previous_copy_error() -> None:
    clipboard = MagicMock(side_effect=[RuntimeError("no display"), None])
    controller = build_controller(clipboard=clipboard)
    controller.submit("ship")

    assert controller.copy_plan() is False
    assert controller.state.error == "Copy failed: no display"

    assert controller.copy_plan() is True
    assert controller.state.error is None
    assert controller.copied is True


def test_reloaded_history_respects_lower_limit() -> None:
    store = InMemoryStore()
    first = build_controller(store=store)
    for idx in range(5):
        first.submit(f"plan {idx}")

    second = build_controller(store=store, history_limit=3)

    assert [item.input for item in second.history] == ["plan 4", "plan 3", "plan 2"]
