from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Set


class ScheduledTask:
    """
    Single-owner handle for the next scheduled run of a coroutine.

    At most one timer is pending at any time: `arm()` cancels the previous one
    before setting a new one. Cancelling only drops the pending timer, never a
    run that has already started; `shutdown()` does both, for every run the
    timer has started and that has not finished yet.
    """

    def __init__(self, callback: Callable[[], Awaitable[object]]):
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._runs: Set[asyncio.Future] = set()

    def arm(self, delay_s: float) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay_s, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def shutdown(self) -> None:
        self.cancel()
        for run in list(self._runs):
            run.cancel()
        self._runs.clear()

    def _fire(self) -> None:
        self._handle = None
        run = asyncio.ensure_future(self._callback())
        self._runs.add(run)
        run.add_done_callback(self._runs.discard)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def in_flight(self) -> int:
        """Runs started by the timer that have not finished yet."""
        return len(self._runs)

    @property
    def when(self) -> float | None:
        """Loop time of the pending run, if any."""
        return self._handle.when() if self._handle is not None else None
