"""JSON persistence of plan history and the task checklist."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from memory.stores.kv_store import KeyValueStore
from memory.types import HistoryItem, Task

logger = logging.getLogger("cp.storage")

HISTORY_KEY = "clear_path_history"
TASKS_KEY = "clear_path_tasks"

_HISTORY_ADAPTER = TypeAdapter(list[HistoryItem])
_TASKS_ADAPTER = TypeAdapter(list[Task])


class PlanStorage:
    """Loads and rewrites whole collections as JSON blobs under fixed keys."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _load(self, key: str, adapter: TypeAdapter[Any]) -> list[Any]:
        raw = self.store.get(key)
        if not raw:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable %s blob: %s", key, exc)
            return []

    def load_history(self) -> list[HistoryItem]:
        return self._load(HISTORY_KEY, _HISTORY_ADAPTER)

    def load_tasks(self) -> list[Task]:
        return self._load(TASKS_KEY, _TASKS_ADAPTER)

    def save_history(self, history: list[HistoryItem]) -> None:
        self.store.set(HISTORY_KEY, _HISTORY_ADAPTER.dump_json(history, by_alias=True).decode("utf-8"))
        logger.debug("Saved %d history items", len(history))

    def save_tasks(self, tasks: list[Task]) -> None:
        self.store.set(TASKS_KEY, _TASKS_ADAPTER.dump_json(tasks, by_alias=True).decode("utf-8"))
        logger.debug("Saved %d tasks", len(tasks))

    def on_history_changed(self, payload: dict[str, Any]) -> None:
        """Event handler for ``history.changed``."""
        self.save_history(payload["history"])

    def on_tasks_changed(self, payload: dict[str, Any]) -> None:
        """Event handler for ``tasks.changed``."""
        self.save_tasks(payload["tasks"])
