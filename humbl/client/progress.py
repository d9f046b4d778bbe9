"""Synthetic progress for single-shot image requests."""
from __future__ import annotations

import asyncio
import random
from typing import Callable, Optional

PROGRESS_CAP = 90.0
PROGRESS_STEP = 15.0
COMPLETE = 100.0

ProgressListener = Callable[[float], None]


class ProgressTicker:
    """Grow ``value`` by a random step every ``interval`` seconds, capped until ``complete``.

    Use as an async context manager; the timer task is cancelled on exit.
    """

    def __init__(
        self,
        interval: float = 0.5,
        *,
        listener: ProgressListener | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.interval = interval
        self.value = 0.0
        self._listener = listener
        self._rng = rng or random.Random()
        self._task: Optional[asyncio.Task[None]] = None

    async def __aenter__(self) -> "ProgressTicker":
        self.value = 0.0
        self._notify()
        self._task = asyncio.create_task(self._run())
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> float:
        self.value = min(PROGRESS_CAP, self.value + self._rng.random() * PROGRESS_STEP)
        self._notify()
        return self.value

    def complete(self) -> None:
        self.value = COMPLETE
        self._notify()

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener(self.value)


__all__ = ["ProgressTicker", "PROGRESS_CAP", "COMPLETE"]
