"""
Named, cancellable scheduled tasks.

Each ScheduledTask owns at most one outstanding schedule. Scheduling again
cancels a schedule that is still waiting for its delay to elapse (replace,
not queue). Once the delay has elapsed and the callback is running, it is
left to finish; superseding running work is the caller's concern.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class ScheduledTask:
    """A single-outstanding-instance delayed callback on the running event loop."""

    def __init__(self, name: str):
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self._fired = False
        self._cancelled = False
        self.replaced_count = 0

    @property
    def pending(self) -> bool:
        """True while a schedule is waiting for its delay to elapse."""
        return (
            self._task is not None
            and not self._task.done()
            and not self._fired
            and not self._cancelled
        )

    @property
    def running(self) -> bool:
        """True while a fired callback is still executing."""
        return self._task is not None and not self._task.done() and self._fired

    def schedule(
        self,
        delay_seconds: float,
        callback: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> asyncio.Task:
        if self.pending:
            self._task.cancel()
            self.replaced_count += 1
            logger.debug(f"Scheduled task '{self.name}' replaced before firing")

        self._fired = False
        self._cancelled = False
        self._task = asyncio.create_task(
            self._run(delay_seconds, callback, *args),
            name=f"scheduled:{self.name}",
        )
        return self._task

    def cancel(self) -> bool:
        """Cancel the pending schedule, if any. Returns True if one was cancelled."""
        if not self.pending:
            return False
        self._task.cancel()
        # Task.cancel() only takes effect on the next loop iteration.
        self._cancelled = True
        logger.debug(f"Scheduled task '{self.name}' cancelled")
        return True

    async def wait(self) -> None:
        """Wait for the current schedule to fire and finish (or be cancelled)."""
        task = self._task
        if task is None:
            return
        await asyncio.wait({task})

    async def _run(self, delay_seconds: float, callback: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        await asyncio.sleep(delay_seconds)
        self._fired = True
        return await callback(*args)
