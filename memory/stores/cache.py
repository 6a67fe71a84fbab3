"""Simple in-memory key-value store."""

from __future__ import annotations

from memory.stores.kv_store import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed transient store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value
