"""Bounded least-recently-used map."""

import logging
import threading
from collections import OrderedDict
from typing import Generic, Hashable, Iterable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """Fixed-capacity LRU map. Reads and writes both refresh recency.

    All access goes through one lock, so a bulk ``put_many`` is observed
    either entirely or not at all by concurrent readers.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("LRU capacity must be at least 1")
        self._capacity = capacity
        self._data: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        """Membership test that does NOT count as a use."""
        with self._lock:
            return key in self._data

    def get(self, key: K) -> V | None:
        with self._lock:
            if key not in self._data:
                return None
            self._data.move_to_end(key, last=True)
            return self._data[key]

    def peek(self, key: K) -> V | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: K, value: V) -> int:
        """Insert or overwrite ``key``. Returns the number of evicted entries."""
        with self._lock:
            return self._put_locked(key, value)

    def put_many(self, items: Iterable[tuple[K, V]]) -> int:
        """Insert all ``items`` in one critical section, in order (last write wins)."""
        items = list(items)
        with self._lock:
            evicted = 0
            for key, value in items:
                evicted += self._put_locked(key, value)
        if evicted:
            logger.debug("LRU evicted %d entries (capacity %d)", evicted, self._capacity)
        return evicted

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def _put_locked(self, key: K, value: V) -> int:
        self._data[key] = value
        self._data.move_to_end(key, last=True)
        evicted = 0
        while len(self._data) > self._capacity:
            self._data.popitem(last=False)
            evicted += 1
        return evicted
