"""
Auto-clean on paste.

Trailing-edge debounce on top of asyncio timer handles: a burst of paste
events produces a single clean, fired once the burst has been quiet for the
configured delay.
"""

import asyncio
import inspect
from enum import Enum
from typing import Any, Callable, Optional, Set

import structlog

from ..config import settings


logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    """Debounce states."""
    IDLE = "idle"
    PENDING = "pending"


class AutoCleanScheduler:
    """
    Debounces paste events into a single clean trigger.

    ``notify_paste`` moves the scheduler to PENDING and (re)arms the timer;
    when it expires the state returns to IDLE and ``trigger`` is invoked
    exactly once. A coroutine returned by the trigger is scheduled as a task
    owned by the scheduler, so ``cancel`` at teardown also stops a clean the
    timer has already started.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        trigger: Callable[[], Any],
        delay_ms: Optional[int] = None,
    ):
        self.trigger = trigger
        self.delay_ms = settings.auto_clean_delay_ms if delay_ms is None else delay_ms

        self._state = SchedulerState.IDLE
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is SchedulerState.PENDING

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000

    def notify_paste(self) -> None:
        """Record a paste event, restarting the quiet period."""
        if self._closed:
            logger.warning("paste_after_scheduler_closed")
            return

        loop = asyncio.get_running_loop()

        if self._handle is not None:
            self._handle.cancel()
            logger.debug("auto_clean_rearmed", delay_ms=self.delay_ms)
        else:
            logger.debug("auto_clean_armed", delay_ms=self.delay_ms)

        self._state = SchedulerState.PENDING
        self._handle = loop.call_later(self.delay_seconds, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._state = SchedulerState.IDLE

        logger.info("auto_clean_triggered")
        result = self.trigger()

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("auto_clean_failed", error=str(error), error_type=type(error).__name__)

    def cancel(self) -> None:
        """Disarm the timer and cancel any clean it started."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("auto_clean_cancelled")

        self._state = SchedulerState.IDLE

        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        """Cancel everything and wait for started cleans to unwind."""
        self._closed = True
        tasks = list(self._tasks)
        self.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> "AutoCleanScheduler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
