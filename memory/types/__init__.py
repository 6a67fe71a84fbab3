"""Typed records persisted to the local store."""

from memory.types.history import HistoryItem
from memory.types.task import Task

__all__ = [
    "HistoryItem",
    "Task",
]
