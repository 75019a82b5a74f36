"""Schedulers for work that may finish after the response was sent."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)

TaskFunc = Callable[..., Awaitable[Any]]


class TaskScheduler(Protocol):
    """Hand off a coroutine function for detached execution.

    The task may run after the caller has returned; its failures are logged
    and never raised back to the caller.
    """

    def schedule(self, func: TaskFunc, *args: Any) -> None: ...


async def run_detached(func: TaskFunc, *args: Any) -> None:
    name = getattr(func, "__qualname__", repr(func))
    try:
        await func(*args)
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("scheduler.task.failed", extra={"task": name})


@dataclass(slots=True)
class BackgroundTasksScheduler:
    """Run tasks through FastAPI ``BackgroundTasks`` once the response is sent."""

    background_tasks: BackgroundTasks

    def schedule(self, func: TaskFunc, *args: Any) -> None:
        self.background_tasks.add_task(run_detached, func, *args)


@dataclass(slots=True)
class AsyncioTaskScheduler:
    """Run tasks on the running event loop, keeping references until done."""

    _tasks: set[asyncio.Task[None]] = field(default_factory=set)

    def schedule(self, func: TaskFunc, *args: Any) -> None:
        task = asyncio.get_running_loop().create_task(run_detached(func, *args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled task to settle."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
