"""Typer command handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from core.app_controller import AppController
from core.orchestrator import Orchestrator, RuntimeBundle
from core.policy_runtime import configure_logging, merge_dicts
from core.state_manager import Mode
from memory.types import HistoryItem, Task
from planner.execution_plan import ExecutionPlan
from planner.plan_parser import strip_ordinal


@dataclass
class CLIOptions:
    """Global options collected by the root callback."""

    root: Path | None = None
    provider: str | None = None
    verbose: bool = False


def _runtime(options: CLIOptions) -> RuntimeBundle:
    orchestrator = Orchestrator(root=options.root)
    config = orchestrator.load_config()
    if options.provider:
        config = merge_dicts(config, {"models": {"llm": {"active_provider": options.provider}}})
    configure_logging(config, verbose=options.verbose)
    return orchestrator.build(config)


def _fail_on_error(controller: AppController) -> None:
    if controller.state.error:
        typer.echo(f"error: {controller.state.error}", err=True)
        raise typer.Exit(code=1)


def _history_item(controller: AppController, history_id: str | None) -> HistoryItem:
    if not controller.history:
        typer.echo("error: history is empty; run `plan` first", err=True)
        raise typer.Exit(code=1)
    item = controller.load_from_history(history_id or controller.history[0].id)
    if item is None:
        typer.echo(f"error: no history item {history_id}", err=True)
        raise typer.Exit(code=1)
    return item


# ── rendering ────────────────────────────────────────────────────────


def render_plan(plan: ExecutionPlan) -> None:
    typer.echo(f"Objective: {plan.objective}")
    typer.echo("")
    typer.echo("Roadmap:")
    for idx, step in enumerate(plan.steps, start=1):
        typer.echo(f"  {idx}. {strip_ordinal(step)}")
    typer.echo("")
    typer.echo(f"First action: {plan.first_action}")
    if plan.common_mistakes:
        typer.echo("")
        typer.echo("Avoid these:")
        for mistake in plan.common_mistakes:
            typer.echo(f"  - {mistake}")


def render_tasks(tasks: list[Task]) -> None:
    if not tasks:
        typer.echo("Roadmap items you add will appear here.")
        return
    for task in tasks:
        mark = "x" if task.completed else " "
        typer.echo(f"[{mark}] {task.id}  {task.text}")
    completed = sum(1 for task in tasks if task.completed)
    typer.echo(f"{completed}/{len(tasks)} completed")


def render_history(items: list[HistoryItem]) -> None:
    if not items:
        typer.echo("No history yet.")
        return
    for item in items:
        day = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d")
        typer.echo(f"{item.id}  {day}  {item.plan.objective}")


# ── one-shot commands ────────────────────────────────────────────────


def plan(options: CLIOptions, text: str) -> None:
    """Generate a plan and record it in history."""
    controller = _runtime(options).controller
    controller.set_mode(Mode.PLAN)
    controller.submit(text)
    _fail_on_error(controller)
    if controller.state.current_plan is not None:
        render_plan(controller.state.current_plan)
        typer.echo("")
        typer.echo(f"Saved as {controller.history[0].id}")


def refine(options: CLIOptions, instruction: str, history_id: str | None) -> None:
    """Refine a plan from history; the refined plan is displayed, not saved."""
    controller = _runtime(options).controller
    _history_item(controller, history_id)
    controller.refine(instruction)
    _fail_on_error(controller)
    if controller.state.current_plan is not None:
        render_plan(controller.state.current_plan)


def brainstorm(options: CLIOptions, text: str) -> None:
    """Print rapid-fire ideas."""
    controller = _runtime(options).controller
    controller.set_mode(Mode.BRAINSTORM)
    controller.submit(text)
    _fail_on_error(controller)
    typer.echo(controller.state.brainstorm_result or "")


def copy(options: CLIOptions, history_id: str | None) -> None:
    """Copy the raw markdown of a history plan to the clipboard."""
    controller = _runtime(options).controller
    _history_item(controller, history_id)
    controller.copy_plan()
    _fail_on_error(controller)
    typer.echo("Copied")


def tasks_list(options: CLIOptions) -> None:
    render_tasks(_runtime(options).controller.tasks)


def tasks_add(options: CLIOptions, text: str) -> None:
    controller = _runtime(options).controller
    task = controller.add_task(text)
    if task is None:
        typer.echo("Task already on the checklist.")
        return
    typer.echo(f"Added {task.id}: {task.text}")


def tasks_add_from_plan(
    options: CLIOptions, history_id: str | None, step: int | None, first_action: bool
) -> None:
    """Add a step (1-based) or the first action of a history plan to the checklist."""
    controller = _runtime(options).controller
    item = _history_item(controller, history_id)
    if first_action:
        text = item.plan.first_action
    elif step is not None and 1 <= step <= len(item.plan.steps):
        text = item.plan.steps[step - 1]
    else:
        typer.echo("error: pass --first-action or a valid --step", err=True)
        raise typer.Exit(code=1)
    task = controller.add_task(text)
    if task is None:
        typer.echo("Task already on the checklist.")
        return
    typer.echo(f"Added {task.id}: {task.text}")


def tasks_toggle(options: CLIOptions, task_id: str) -> None:
    controller = _runtime(options).controller
    controller.toggle_task(task_id)
    render_tasks(controller.tasks)


def tasks_remove(options: CLIOptions, task_id: str) -> None:
    controller = _runtime(options).controller
    controller.remove_task(task_id)
    render_tasks(controller.tasks)


def tasks_clear_done(options: CLIOptions) -> None:
    controller = _runtime(options).controller
    controller.clear_completed()
    render_tasks(controller.tasks)


def history_list(options: CLIOptions, limit: int) -> None:
    render_history(_runtime(options).controller.recent_history(limit))


def history_show(options: CLIOptions, history_id: str, raw: bool) -> None:
    controller = _runtime(options).controller
    item = _history_item(controller, history_id)
    typer.echo(f"Input: {item.input}")
    typer.echo("")
    if raw:
        typer.echo(item.plan.raw_markdown)
    else:
        render_plan(item.plan)


def config_show(options: CLIOptions) -> None:
    """Show effective runtime config."""
    bundle = _runtime(options)
    typer.echo(json.dumps(_json_safe(bundle.config), indent=2))


# ── interactive session ──────────────────────────────────────────────

SESSION_HELP = """\
Type text to submit it. Commands:
  :mode plan|brainstorm   switch mode
  :refine <instruction>   refine the current plan
  :add <n>|first          add step n or the first action to the checklist
  :tasks                  show the checklist
  :toggle <id>            toggle a task
  :rm <id>                remove a task
  :clear                  clear completed tasks
  :copy                   copy the current plan or brainstorm
  :history                list recent plans
  :load <id>              show a plan from history
  :quit                   leave the session"""


def _session_add(controller: AppController, arg: str) -> None:
    current = controller.state.current_plan
    if current is None:
        typer.echo("No plan displayed.")
        return
    if arg == "first":
        text = current.first_action
    elif arg.isdigit() and 1 <= int(arg) <= len(current.steps):
        text = current.steps[int(arg) - 1]
    else:
        typer.echo("Usage: :add <step number>|first")
        return
    task = controller.add_task(text)
    typer.echo(f"Added: {task.text}" if task else "Already on the checklist.")


def _session_command(controller: AppController, command: str, arg: str) -> bool:
    """Run one ``:command``; returns ``False`` to end the session."""
    if command in {"quit", "exit"}:
        return False
    if command == "mode":
        if arg not in {m.value for m in Mode}:
            typer.echo("Usage: :mode plan|brainstorm")
        else:
            controller.set_mode(arg)
            typer.echo(f"Mode: {arg}")
    elif command == "refine":
        if not controller.refine(arg):
            typer.echo("Nothing to refine.")
        elif controller.state.current_plan is not None and not controller.state.error:
            render_plan(controller.state.current_plan)
    elif command == "add":
        _session_add(controller, arg)
    elif command == "tasks":
        render_tasks(controller.tasks)
    elif command == "toggle":
        controller.toggle_task(arg)
        render_tasks(controller.tasks)
    elif command == "rm":
        controller.remove_task(arg)
        render_tasks(controller.tasks)
    elif command == "clear":
        controller.clear_completed()
        render_tasks(controller.tasks)
    elif command == "copy":
        copied = (
            controller.copy_plan()
            if controller.state.mode is Mode.PLAN
            else controller.copy_brainstorm()
        )
        if copied:
            typer.echo("Copied")
    elif command == "history":
        render_history(controller.recent_history())
    elif command == "load":
        item = controller.load_from_history(arg)
        if item is None:
            typer.echo(f"No history item {arg}")
        else:
            render_plan(item.plan)
    else:
        typer.echo(SESSION_HELP)
    return True


def session(options: CLIOptions) -> None:
    """Run the interactive plan/brainstorm loop."""
    controller = _runtime(options).controller
    typer.echo("Clear Path session. Type ':help' for commands, ':quit' to leave.")
    shown_error: str | None = None
    while True:
        try:
            user_text = typer.prompt(controller.state.mode.value)
        except typer.Abort:
            typer.echo("bye")
            break
        stripped = user_text.strip()
        if stripped.startswith(":"):
            command, _, arg = stripped[1:].partition(" ")
            if command.lower() in {"refine", "copy"}:
                shown_error = None
            if not _session_command(controller, command.lower(), arg.strip()):
                typer.echo("bye")
                break
        elif controller.submit(user_text):
            shown_error = None
            if controller.state.mode is Mode.PLAN and controller.state.current_plan is not None:
                if not controller.state.error:
                    render_plan(controller.state.current_plan)
            elif controller.state.brainstorm_result is not None:
                typer.echo(controller.state.brainstorm_result)
        if controller.state.error and controller.state.error != shown_error:
            typer.echo(f"error: {controller.state.error}", err=True)
        shown_error = controller.state.error


def _json_safe(payload: object) -> Any:
    """Convert paths and datetimes to strings for JSON output."""
    if isinstance(payload, dict):
        return {k: _json_safe(v) for k, v in payload.items()}
    if isinstance(payload, list):
        return [_json_safe(v) for v in payload]
    if isinstance(payload, Path):
        return str(payload)
    if hasattr(payload, "isoformat"):
        return payload.isoformat()
    return payload
