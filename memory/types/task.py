"""Checklist task model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Task(BaseModel):
    """Action item derived from a plan step or first action."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    completed: bool = False
    created_at: int
