"""
Background eviction of expired vector-store sessions.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .vector_store import SessionVectorStore

logger = logging.getLogger("stylematch.scheduler")


class EvictionScheduler:
    """
    Periodically calls `store.evict_expired()` on a fixed interval.

    The host process owns the lifecycle: call `start()` once an event loop is
    running and `await stop()` on shutdown.
    """

    def __init__(self, store: SessionVectorStore, interval_seconds: float) -> None:
        self._store = store
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="vector-store-eviction")
        logger.info("Eviction scheduler started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Eviction scheduler stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._store.evict_expired()
            except Exception:
                logger.exception("Unexpected error during session eviction")
                # Keep sweeping on the next tick
                continue
