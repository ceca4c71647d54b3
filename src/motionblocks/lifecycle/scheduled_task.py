"""
Scheduled Task - cancellable, reschedulable delayed callback

The coordinator's timers (debounce, grace window, deferred decompile) are
ScheduledTask instances instead of bare timer handles. Scheduling again
cancels the pending run, so only the last request in a burst fires.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from motionblocks.lifecycle.task_registry import create_tracked_task, TaskCategory
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)

TimerCallback = Callable[[], Union[None, Awaitable[None]]]


class ScheduledTask:
    """
    Delayed callback owned by one component

    Example:
        debounce = ScheduledTask(self._flush, delay=0.2,
                                 category=TaskCategory.DEBOUNCE,
                                 description="recompile after edits")
        debounce.schedule()   # (re)start the countdown
        debounce.cancel()     # drop it

    The callback may be sync or async. It runs on the event loop that was
    running when schedule() was called.
    """

    def __init__(
        self,
        callback: TimerCallback,
        delay: float,
        *,
        category: TaskCategory = TaskCategory.GENERAL,
        description: str = "scheduled task",
        owner: Optional[str] = None,
    ):
        self._callback = callback
        self.delay = delay
        self._category = category
        self._description = description
        self._owner = owner
        self._task: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None
        self.fire_count = 0

    @property
    def pending(self) -> bool:
        """True while a countdown is in progress"""
        return self._task is not None and not self._task.done()

    def schedule(self, delay: Optional[float] = None) -> None:
        """Start (or restart) the countdown"""
        self.cancel()
        wait = self.delay if delay is None else delay
        self._task = create_tracked_task(
            self._run(wait),
            category=self._category,
            description=self._description,
            owner=self._owner,
        )

    def cancel(self) -> bool:
        """Cancel the pending countdown; returns True if one was pending"""
        if not self.pending:
            self._task = None
            return False
        self._task.cancel()
        self._task = None
        return True

    async def wait(self) -> None:
        """Wait until the pending run (if any) has finished or was cancelled"""
        while True:
            task = self._task if self.pending else self._running
            if task is None or task.done():
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    async def _run(self, delay: float) -> Any:
        await asyncio.sleep(delay)

        # Detach before running so the callback may schedule this timer again
        current = asyncio.current_task()
        self._task = None
        self._running = current
        try:
            self.fire_count += 1
            result = self._callback()
            if inspect.isawaitable(result):
                return await result
            return result
        finally:
            if self._running is current:
                self._running = None
