"""CLI entrypoint for Clear Path."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Turn messy ideas into step-by-step execution plans")
tasks_app = typer.Typer(help="Checklist commands")
history_app = typer.Typer(help="Plan history commands")
config_app = typer.Typer(help="Configuration commands")


def _options(ctx: typer.Context) -> commands.CLIOptions:
    return ctx.obj or commands.CLIOptions()


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path | None = typer.Option(None, "--root", help="Directory holding config/ and workspace/ (default: $CLEAR_PATH_ROOT or cwd)"),
    provider: str | None = typer.Option(None, "--provider", help="LLM provider: gemini or mock"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    ctx.obj = commands.CLIOptions(root=root, provider=provider, verbose=verbose)


@app.command("plan")
def plan_cmd(ctx: typer.Context, text: str = typer.Argument(..., help="Messy idea, goal, or brain dump")) -> None:
    """Build an execution plan."""
    commands.plan(_options(ctx), text=text)


@app.command("refine")
def refine_cmd(
    ctx: typer.Context,
    instruction: str = typer.Argument(..., help="e.g. 'Break step 3 down further'"),
    history_id: str | None = typer.Option(None, "--from", help="History id (default: newest)"),
) -> None:
    """Refine a plan from history."""
    commands.refine(_options(ctx), instruction=instruction, history_id=history_id)


@app.command("brainstorm")
def brainstorm_cmd(ctx: typer.Context, text: str = typer.Argument(..., help="Brainstorm prompt")) -> None:
    """Quick brainstorm."""
    commands.brainstorm(_options(ctx), text=text)


@app.command("copy")
def copy_cmd(
    ctx: typer.Context,
    history_id: str | None = typer.Option(None, "--from", help="History id (default: newest)"),
) -> None:
    """Copy a plan's markdown to the clipboard."""
    commands.copy(_options(ctx), history_id=history_id)


@app.command("session")
def session_cmd(ctx: typer.Context) -> None:
    """Interactive session."""
    commands.session(_options(ctx))


@tasks_app.command("list")
def tasks_list_cmd(ctx: typer.Context) -> None:
    """Show the checklist."""
    commands.tasks_list(_options(ctx))


@tasks_app.command("add")
def tasks_add_cmd(ctx: typer.Context, text: str = typer.Argument(..., help="Task text")) -> None:
    """Add a task."""
    commands.tasks_add(_options(ctx), text=text)


@tasks_app.command("add-from-plan")
def tasks_add_from_plan_cmd(
    ctx: typer.Context,
    history_id: str | None = typer.Option(None, "--from", help="History id (default: newest)"),
    step: int | None = typer.Option(None, "--step", min=1, help="Step number"),
    first_action: bool = typer.Option(False, "--first-action", help="Add the first action"),
) -> None:
    """Add a plan step or first action to the checklist."""
    commands.tasks_add_from_plan(
        _options(ctx), history_id=history_id, step=step, first_action=first_action
    )


@tasks_app.command("toggle")
def tasks_toggle_cmd(ctx: typer.Context, task_id: str) -> None:
    """Toggle completion."""
    commands.tasks_toggle(_options(ctx), task_id=task_id)


@tasks_app.command("remove")
def tasks_remove_cmd(ctx: typer.Context, task_id: str) -> None:
    """Remove a task."""
    commands.tasks_remove(_options(ctx), task_id=task_id)


@tasks_app.command("clear-done")
def tasks_clear_done_cmd(ctx: typer.Context) -> None:
    """Remove completed tasks."""
    commands.tasks_clear_done(_options(ctx))


@history_app.command("list")
def history_list_cmd(ctx: typer.Context, limit: int = typer.Option(5, min=1, max=20)) -> None:
    """List recent plans."""
    commands.history_list(_options(ctx), limit=limit)


@history_app.command("show")
def history_show_cmd(
    ctx: typer.Context,
    history_id: str,
    raw: bool = typer.Option(False, "--raw", help="Print the original markdown"),
) -> None:
    """Show one plan from history."""
    commands.history_show(_options(ctx), history_id=history_id, raw=raw)


@config_app.command("show")
def config_show_cmd(ctx: typer.Context) -> None:
    """Show effective configuration."""
    commands.config_show(_options(ctx))


app.add_typer(tasks_app, name="tasks")
app.add_typer(history_app, name="history")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
