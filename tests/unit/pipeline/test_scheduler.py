from __future__ import annotations

import asyncio
import logging

import pytest
from fastapi import BackgroundTasks

from src.anything_md.pipeline.scheduler import AsyncioTaskScheduler, BackgroundTasksScheduler

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_after_caller_returns():
    scheduler = AsyncioTaskScheduler()
    finished: list[str] = []
    gate = asyncio.Event()

    async def job(name: str) -> None:
        await gate.wait()
        finished.append(name)

    scheduler.schedule(job, "mirror")
    assert finished == []
    assert scheduler.pending == 1

    gate.set()
    await scheduler.drain()

    assert finished == ["mirror"]
    assert scheduler.pending == 0


@pytest.mark.asyncio
async def test_asyncio_scheduler_logs_failures(caplog):
    scheduler = AsyncioTaskScheduler()

    async def boom() -> None:
        raise RuntimeError("store unavailable")

    with caplog.at_level(logging.ERROR):
        scheduler.schedule(boom)
        await scheduler.drain()

    assert any(record.getMessage() == "scheduler.task.failed" for record in caplog.records)


@pytest.mark.asyncio
async def test_background_tasks_scheduler_defers_until_run():
    background = BackgroundTasks()
    calls: list[int] = []

    async def job(value: int) -> None:
        calls.append(value)

    BackgroundTasksScheduler(background).schedule(job, 5)
    assert calls == []

    await background()
    assert calls == [5]
