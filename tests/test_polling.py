from __future__ import annotations

import asyncio

import pytest

from hillside.core.errors import ServerError
from hillside.services.polling import Poller


@pytest.mark.asyncio
async def test_overlapping_tick_is_skipped() -> None:
    release = asyncio.Event()
    runs: list[int] = []

    async def slow_job() -> None:
        runs.append(1)
        await release.wait()

    poller = Poller("dashboard", 10, slow_job)
    first = asyncio.create_task(poller.tick())
    await asyncio.sleep(0)

    assert poller.in_flight is True
    assert await poller.tick() is False
    release.set()
    assert await first is True
    assert runs == [1]
    assert poller.skipped == 1


@pytest.mark.asyncio
async def test_failed_tick_keeps_polling() -> None:
    async def failing_job() -> None:
        raise ServerError(500, "down")

    poller = Poller("security", 15, failing_job)

    assert await poller.tick() is True
    assert poller.in_flight is False


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent() -> None:
    async def job() -> None:
        return None

    poller = Poller("home", 60, job)
    poller.start()
    poller.start()
    assert poller.running is True

    poller.stop()
    poller.stop()
    assert poller.running is False
