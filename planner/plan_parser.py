"""Markdown → ExecutionPlan extraction.

The model is asked to answer with four fixed ``##`` sections. Each section is
located on its own, so drift in one section never spoils the others: a
missing section only falls back to a sentinel or an empty list. Parsing never
raises.
"""

from __future__ import annotations

import re

from planner.execution_plan import ACTION_NOT_FOUND, OBJECTIVE_NOT_FOUND, ExecutionPlan

OBJECTIVE_HEADING = "## Objective"
STEPS_HEADING = "## Step-by-Step Plan"
FIRST_ACTION_HEADING = "## First Action to Take"
MISTAKES_HEADING = "## Common Mistakes to Avoid"

_ORDINAL_RE = re.compile(r"^\d+\.\s*")
_BULLET_RE = re.compile(r"^- ")


def _section_re(heading: str) -> re.Pattern[str]:
    # Body runs until the next "\n##" or the end of the text.
    return re.compile(re.escape(heading) + r"\n(.*?)(?=\n##|\Z)", re.DOTALL)


_OBJECTIVE_RE = _section_re(OBJECTIVE_HEADING)
_STEPS_RE = _section_re(STEPS_HEADING)
_FIRST_ACTION_RE = _section_re(FIRST_ACTION_HEADING)
_MISTAKES_RE = _section_re(MISTAKES_HEADING)


def _section(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def _non_blank_lines(body: str) -> list[str]:
    return [line for line in body.split("\n") if line.strip()]


def strip_ordinal(text: str) -> str:
    """Remove a leading ``"1. "`` style ordinal from a single line."""
    return _ORDINAL_RE.sub("", text).strip()


def parse_execution_plan(text: str) -> ExecutionPlan:
    """Parse model markdown into an ``ExecutionPlan``.

    Steps keep their own numbering except the first one: the ordinal is
    removed once from the start of the section body, not per line. Callers
    that need clean step text use ``strip_ordinal``.
    """
    text = text or ""

    objective = _section(_OBJECTIVE_RE, text)
    first_action = _section(_FIRST_ACTION_RE, text)

    steps_body = _section(_STEPS_RE, text)
    steps = _non_blank_lines(_ORDINAL_RE.sub("", steps_body, count=1)) if steps_body else []

    mistakes_body = _section(_MISTAKES_RE, text)
    mistakes = (
        [_BULLET_RE.sub("", line) for line in _non_blank_lines(mistakes_body)]
        if mistakes_body
        else []
    )

    return ExecutionPlan(
        objective=objective if objective is not None else OBJECTIVE_NOT_FOUND,
        steps=steps,
        first_action=first_action if first_action is not None else ACTION_NOT_FOUND,
        common_mistakes=mistakes,
        raw_markdown=text,
    )
