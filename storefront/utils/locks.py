# storefront/utils/locks.py
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator
import asyncio, logging

logger = logging.getLogger(__name__)

class WriteQueue:
    """
    Single-writer queue for one storage backend.
    asyncio.Lock wakes waiters in FIFO order, so at most one read-modify-write
    is in flight and writes apply in submission order.
    Scope is this process only: separate server instances sharing a file or
    KV key are not coordinated (last write wins).
    """
    def __init__(self, name: str):
        self.name = name
        self._lock = asyncio.Lock()
        self._waiting = 0

    @asynccontextmanager
    async def serialized(self) -> AsyncIterator[None]:
        self._waiting += 1
        if self._lock.locked():
            logger.debug("write queue %s busy, waiting=%s", self.name, self._waiting)
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1
        try:
            yield
        finally:
            self._lock.release()
