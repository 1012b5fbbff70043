# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Task scheduler — runs registered jobs in fixed-rate background loops."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import structlog

logger = structlog.get_logger("epimetheus.scheduling")


@dataclass(frozen=True)
class _ScheduledEntry:
    """Internal record of a registered job and its trigger."""

    name: str
    job: Callable[..., Any]
    fixed_rate: timedelta


class TaskScheduler:
    """Runs each registered job in its own fixed-rate loop.

    A job fires immediately and then once per
    period, measured from the previous planned start. Runs of one job
    never overlap: when a run overshoots its period, the next run starts
    as soon as it returns. An exception escaping a run is logged and the
    loop keeps going.

    Usage::

        scheduler = TaskScheduler()
        scheduler.schedule("collect", collector.collect, fixed_rate=timedelta(seconds=60))
        await scheduler.start()
        # ... application runs ...
        await scheduler.stop()
    """

    def __init__(self) -> None:
        self._running: bool = False
        self._entries: list[_ScheduledEntry] = []
        self._loop_tasks: list[asyncio.Task[Any]] = []

    @property
    def running(self) -> bool:
        return self._running

    def schedule(
        self,
        name: str,
        job: Callable[..., Any],
        fixed_rate: timedelta,
    ) -> None:
        """Register *job* to run every *fixed_rate*. Call before :meth:`start`."""
        if fixed_rate.total_seconds() <= 0:
            raise ValueError(f"fixed_rate must be positive, got {fixed_rate}")
        self._entries.append(_ScheduledEntry(name, job, fixed_rate))
        logger.debug("scheduled_job_registered", job=name, period_seconds=fixed_rate.total_seconds())

    async def start(self) -> None:
        """Start all scheduling loops."""
        self._running = True
        for entry in self._entries:
            task = asyncio.create_task(self._run_fixed_rate_loop(entry), name=entry.name)
            task.add_done_callback(self._loop_done_callback)
            self._loop_tasks.append(task)

    async def stop(self) -> None:
        """Stop all scheduling loops, cancelling any run in progress."""
        self._running = False

        for task in self._loop_tasks:
            task.cancel()

        if self._loop_tasks:
            await asyncio.gather(*self._loop_tasks, return_exceptions=True)

        self._loop_tasks.clear()

    @staticmethod
    def _loop_done_callback(task: asyncio.Task[Any]) -> None:
        """Log errors from scheduling loop tasks."""
        if not task.cancelled():
            exc = task.exception()
            if exc is not None:
                logger.error("scheduling_loop_failed", job=task.get_name(), error=str(exc), exc_info=exc)

    async def _run_fixed_rate_loop(self, entry: _ScheduledEntry) -> None:
        """Loop: execute, then sleep until the next planned start."""
        loop = asyncio.get_running_loop()
        period = entry.fixed_rate.total_seconds()
        next_run = loop.time()
        while self._running:
            await self._invoke(entry)
            next_run = max(next_run + period, loop.time())
            await asyncio.sleep(next_run - loop.time())

    @staticmethod
    async def _invoke(entry: _ScheduledEntry) -> None:
        """Invoke a job, handling both sync and async callables."""
        try:
            result = entry.job()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:  # noqa: BLE001
            logger.exception("scheduled_job_failed", job=entry.name, error=str(exc))
