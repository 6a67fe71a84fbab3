"""In-process event bus connecting state changes to persistence."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("cp.events")

HISTORY_CHANGED = "history.changed"
TASKS_CHANGED = "tasks.changed"

EventHandler = Callable[[dict[str, Any]], None]


class EventBus:
    """Dispatches events to subscribers by event name, in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        handlers = self._handlers.get(event_name, [])
        logger.debug("Emitting %s to %d handler(s)", event_name, len(handlers))
        for handler in handlers:
            handler(payload)
