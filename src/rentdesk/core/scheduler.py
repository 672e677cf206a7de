"""Fixed-rate repeating timer for the asyncio event loop."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Run an async callback every ``interval_seconds``.

    Each tick launches the callback as its own task, so a slow callback never
    delays the next tick; callbacks that must not overlap guard themselves.
    stop() only prevents future ticks. Callbacks already running finish.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[object]],
        interval_seconds: float,
        name: str = "periodic-task",
    ):
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self, interval_seconds: Optional[float] = None) -> None:
        """Start ticking; an already running timer is replaced."""
        if interval_seconds is not None:
            self._interval = interval_seconds
        self.stop()
        self._loop_task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    def stop(self) -> None:
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None

    async def wait_idle(self) -> None:
        """Wait for callbacks that are still in flight."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            task = asyncio.create_task(self._fire())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def _fire(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.exception("%s tick failed", self._name)
