"""Key-value store port."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """String-keyed store of string values."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``."""
