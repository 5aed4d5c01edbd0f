"""Deduplicate concurrent refreshes of the same cache key."""

import asyncio
from typing import Any, Callable, Coroutine, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlight(Generic[K, V]):
    """At most one in-flight call per key; late joiners await the same task.

    The refresh runs as its own task and every caller awaits it through
    ``asyncio.shield``, so a cancelled caller never aborts the shared
    refresh. All callers observe the same value or the same exception.
    """

    def __init__(self) -> None:
        self._inflight: dict[K, asyncio.Task[V]] = {}

    def in_flight(self, key: K) -> bool:
        return key in self._inflight

    async def do(self, key: K, fn: Callable[[], Coroutine[Any, Any, V]]) -> V:
        # No await between lookup and insert, so this check-and-set is atomic on the loop
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._run(key, fn))
            task.add_done_callback(_consume_exception)
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _run(self, key: K, fn: Callable[[], Coroutine[Any, Any, V]]) -> V:
        try:
            return await fn()
        finally:
            self._inflight.pop(key, None)


def _consume_exception(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled; keep asyncio from warning about an unread error
    if not task.cancelled():
        task.exception()
