"""Periodic refresh of navigation badge counters.

The poller is owned by whoever displays the counters (a UI shell, a websocket
session...).  It refreshes on a fixed interval and on demand, and stops when
its cancellation event is set.  Reads are best effort: a refresh racing a write
may under- or over-count until the next tick.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from backend.core.errors import StoreError
from backend.domain import NotificationCounts

logger = logging.getLogger(__name__)

CountsFetcher = Callable[[], NotificationCounts]
CountsListener = Callable[[NotificationCounts], Awaitable[None] | None]


class NotificationPoller:
    def __init__(
        self,
        fetch: CountsFetcher,
        *,
        interval: float = 5.0,
        on_update: CountsListener | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self._interval = interval
        self._on_update = on_update
        self._stop = stop_event or asyncio.Event()
        self._latest = NotificationCounts()
        self._task: asyncio.Task[None] | None = None

    @property
    def latest(self) -> NotificationCounts:
        return self._latest

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> NotificationCounts:
        """Fetch once now, e.g. after navigation."""

        try:
            counts = await asyncio.to_thread(self._fetch)
        except StoreError as exc:
            logger.warning("Notification refresh failed: %s", exc)
            return self._latest
        self._latest = counts
        if self._on_update is not None:
            try:
                result = self._on_update(counts)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:  # listener failures must not end the poll loop
                logger.exception("Notification listener failed")
        return counts

    async def run(self) -> None:
        while not self._stop.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

    def start(self) -> asyncio.Task[None]:
        if not self.running:
            self._task = asyncio.create_task(self.run())
        return self._task  # type: ignore[return-value]

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
