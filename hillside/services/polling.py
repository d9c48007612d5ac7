"""Interval refresh for views (dashboard, security, analytics, home, inbox)."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from hillside.core.errors import ApiError, TransportError
from hillside.core.logging import get_logger

logger = get_logger("polling")

PollJob = Callable[[], Awaitable[Any]]


class Poller:
    """Runs ``job`` every ``interval_seconds``; overlapping ticks are skipped."""

    def __init__(self, name: str, interval_seconds: float, job: PollJob):
        self.name = name
        self.interval_seconds = interval_seconds
        self.job = job
        self._lock = asyncio.Lock()
        self._scheduler: AsyncIOScheduler | None = None
        self.ticks = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def tick(self) -> bool:
        if self._lock.locked():
            self.skipped += 1
            logger.info("poll_tick_skipped", poller=self.name)
            return False

        async with self._lock:
            self.ticks += 1
            try:
                await self.job()
            except (ApiError, TransportError) as exc:
                # Background refreshes keep the last good data on screen.
                logger.warning("poll_tick_failed", poller=self.name, error=str(exc))
        return True

    def start(self) -> None:
        if self._scheduler is not None:
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=f"poll_{self.name}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("poller_started", poller=self.name, interval_seconds=self.interval_seconds)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("poller_stopped", poller=self.name)
