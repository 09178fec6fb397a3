"""Per-key asyncio lock registry.

Serializes work on one queue item or one tipster without a global lock:
operations on different keys never wait on each other. Locks are
dropped from the registry once nobody holds or awaits them.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLock:
    """Registry of asyncio.Lock instances keyed by an arbitrary hashable.

    Example:
        >>> locks = KeyedLock()
        >>> async with locks.hold(queue_item_id):
        ...     ...  # read-modify-write the item
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for key for the duration of the block."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
