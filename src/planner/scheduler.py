"""
Timer tick scheduler

Drives the one-second timer tick on the asyncio event loop. The loop only
runs while at least one timer is running and exits on its own once every
timer is paused, reset or expired. A failing tick is logged and ends the
loop until the next timer start.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

TICK_INTERVAL_SECONDS = 1.0


class TimerTickScheduler:
    """Runs ``on_tick`` once per interval while ``has_running`` is true."""

    def __init__(
        self,
        on_tick: Callable[[], Any],
        has_running: Callable[[], bool],
        interval_seconds: float = TICK_INTERVAL_SECONDS,
    ):
        """
        Args:
            on_tick: synchronous batched state transition applied per tick
            has_running: whether any timer still needs ticking
            interval_seconds: delay between ticks
        """
        self.on_tick = on_tick
        self.has_running = has_running
        self.interval_seconds = interval_seconds
        self.logger = logging.getLogger(__name__)

        self._task: Optional[asyncio.Task] = None
        self._tick_count = 0

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop (no-op if already ticking)."""
        if self.is_running():
            self.logger.debug("Tick loop is already running")
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run_loop())
        self.logger.info("Timer tick loop started")

    def stop(self) -> None:
        """Cancel the tick loop."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        self._task = None
        self.logger.info("Timer tick loop stopped")

    async def wait_idle(self) -> None:
        """Wait until the tick loop exits on its own."""
        if self._task is not None:
            await asyncio.shield(self._task)

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.is_running(),
            "interval_seconds": self.interval_seconds,
            "tick_count": self._tick_count,
        }

    async def _run_loop(self) -> None:
        while self.has_running():
            await asyncio.sleep(self.interval_seconds)
            try:
                self.on_tick()
            except Exception as e:
                self.logger.error(f"Timer tick failed: {e}", exc_info=True)
                self._task = None
                return
            self._tick_count += 1
        self.logger.info("Tick loop exited: no running timers")
