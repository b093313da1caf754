# parkki/services/subscriber_registry.py
"""
Registry of currently connected live subscribers.

A subscriber handle is anything with async `send_text(str)` and `close()`,
in production a Starlette WebSocket. Handles are added on connect and
removed on disconnect or after a failed send. Iteration always works on a
copy, so connections may come and go while a broadcast is running.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Protocol, Set


class Subscriber(Protocol):
    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


class SubscriberRegistry:
    """Lock-guarded set of active subscriber handles."""

    def __init__(self):
        self._subscribers: Set[Subscriber] = set()
        self._lock = asyncio.Lock()

    async def register(self, handle: Subscriber) -> None:
        async with self._lock:
            self._subscribers.add(handle)

    async def unregister(self, handle: Subscriber) -> bool:
        """Remove `handle`. Returns False when it was not registered."""
        async with self._lock:
            if handle not in self._subscribers:
                return False
            self._subscribers.discard(handle)
            return True

    async def snapshot(self) -> List[Subscriber]:
        async with self._lock:
            return list(self._subscribers)

    async def for_each_active(self, fn: Callable[[Subscriber], Awaitable[Any]]) -> List[Any]:
        """
        Call `fn` on every handle registered at the moment of the call,
        concurrently. Results come back in the order of the copied handles.
        """
        handles = await self.snapshot()
        if not handles:
            return []
        return await asyncio.gather(*(fn(h) for h in handles))

    def __contains__(self, handle: Subscriber) -> bool:
        return handle in self._subscribers

    def count(self) -> int:
        return len(self._subscribers)
