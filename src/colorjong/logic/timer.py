"""
Cancellable step timer for paced table play.

The session drivers schedule one step at a time (a draw after a short
pause, an AI decision after a think delay, the next batch hand). Scheduling
a new step replaces any step still waiting. A step may schedule its
successor from inside its own callback.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class StepTimer:
    """Run at most one delayed async callback at a time."""

    def __init__(self) -> None:
        self._active_task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._active_task is not None and not self._active_task.done()

    def schedule(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        """Run callback after delay seconds, cancelling any step still waiting."""
        self.cancel()
        self._active_task = asyncio.create_task(self._run(max(0.0, delay), callback))

    def cancel(self) -> None:
        """Cancel the waiting step. A step that is currently running its callback finishes normally."""
        task = self._active_task
        self._active_task = None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

    async def wait(self) -> None:
        """Wait until no step is pending, following steps scheduled by callbacks."""
        while (task := self._active_task) is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    async def _run(self, seconds: float, callback: Callable[[], Awaitable[None]]) -> None:
        try:
            await asyncio.sleep(seconds)
            await callback()
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("step callback failed")
