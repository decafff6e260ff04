"""Single cooperative 1 Hz ticker on the asyncio loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Ticker:
    """
    Calls `callback` every `interval` seconds until stopped. The callback only
    recomputes derived values from wall-clock stamps, so a late or skipped tick
    (e.g. after the process was suspended) loses nothing.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running loop (no-op if already ticking)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def aclose(self) -> None:
        """Stop and wait for the ticking task to finish unwinding."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self._callback()
            except Exception:
                logger.exception("Ticker callback failed")
