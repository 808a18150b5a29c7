"""
tasks.py - Outstanding asynchronous work collected during a build

Image conversions and deferred asset writes are started eagerly while
posts are scanned and awaited once, as a barrier, when the build ends.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

logger = logging.getLogger(__name__)


class TaskQueue:
    """Ordered collection of awaitables; not an ownership structure."""

    def __init__(self):
        self._tasks: List[asyncio.Future] = []

    def push(self, task: asyncio.Future) -> None:
        self._tasks.append(task)

    def extend(self, tasks: Iterable[asyncio.Future]) -> None:
        self._tasks.extend(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """
        Await every task ever pushed, in push order.

        The first failure propagates after the remaining tasks are cancelled.
        """
        logger.debug("Waiting on %d pending task(s)", len(self._tasks))
        try:
            for task in list(self._tasks):
                await task
        except BaseException:
            self.cancel_all()
            raise

    def cancel_all(self) -> int:
        """Cancel whatever has not finished yet; returns how many were cancelled."""
        cancelled = 0
        for task in self._tasks:
            if not task.done():
                task.cancel()
                cancelled += 1
            elif not task.cancelled():
                # retrieve so asyncio does not log "exception was never retrieved"
                task.exception()
        return cancelled
