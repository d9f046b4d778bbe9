"""Synthetic progress ticker tests."""
from __future__ import annotations

import asyncio
import random

from humbl.client.progress import COMPLETE, PROGRESS_CAP, ProgressTicker


def test_ticks_are_capped_until_complete() -> None:
    seen: list[float] = []
    ticker = ProgressTicker(listener=seen.append, rng=random.Random(1))
    for _ in range(50):
        ticker.tick()

    assert ticker.value == PROGRESS_CAP
    assert seen == sorted(seen)
    ticker.complete()
    assert ticker.value == COMPLETE


def test_timer_is_torn_down_on_every_exit() -> None:
    async def _run() -> None:
        seen: list[float] = []
        async with ProgressTicker(0.001, listener=seen.append) as ticker:
            await asyncio.sleep(0.02)
            assert ticker.running
        assert not ticker.running
        assert seen[0] == 0
        assert 0 < seen[-1] <= PROGRESS_CAP

        try:
            async with ProgressTicker(0.001) as failing:
                raise RuntimeError("request failed")
        except RuntimeError:
            pass
        assert not failing.running

    asyncio.run(_run())
