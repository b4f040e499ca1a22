"""Thread-safe in-memory key-value store.

Single owner of a dict; callers never take locks themselves. Exposes
only get / set / set_if_absent / pop and read-only snapshots, so no
caller can observe a partially written entry.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class ConcurrentMap(Generic[K, V]):
    """Dict guarded by a single lock. Values are stored and returned as-is."""

    def __init__(self) -> None:
        self._items: dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        """Return the value for key or None."""
        with self._lock:
            return self._items.get(key)

    def set(self, key: K, value: V) -> None:
        """Store value under key, replacing any previous value."""
        with self._lock:
            self._items[key] = value

    def set_if_absent(self, key: K, value: V) -> tuple[V, bool]:
        """Store value only if key is absent.

        Returns:
            (value now stored under key, True if this call stored it).
        """
        with self._lock:
            current = self._items.get(key)
            if current is not None:
                return current, False
            self._items[key] = value
            return value, True

    def pop(self, key: K) -> V | None:
        """Remove key and return its value, or None if absent."""
        with self._lock:
            return self._items.pop(key, None)

    def snapshot(self) -> dict[K, V]:
        """Return a shallow copy of the current contents."""
        with self._lock:
            return dict(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[K]:
        return iter(self.snapshot())
