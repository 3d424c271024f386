"""
pacer.py — Cancelable, time-paced step suspension
==================================================
The Pacer is the ONLY place a run suspends.  The run driver awaits
`pacer.step()` once per observable step; the call sleeps for the
configured interval and then reports whether the run may continue.

    token = CancellationToken()
    pacer = Pacer(token, interval=0.05)
    if await pacer.step() is Signal.CANCELED:
        ...stop touching the model, do not finalise success state...

Cancellation wakes a sleeping pacer immediately: the sleep is a wait
on the token with a timeout, not a bare asyncio.sleep.

The Pacer holds no algorithmic state; it only shapes wall-clock
cadence and carries the cancellation signal.
"""

import asyncio
from enum import Enum


class Signal(Enum):
    RESUME   = "resume"
    CANCELED = "canceled"


class CancellationToken:
    """One per Run.  Passed by reference; never ambient / global."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_canceled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class Pacer:
    """
    Attributes:
        token    : CancellationToken consulted around every suspension.
        interval : Seconds per step (live-adjustable via set_interval).
        floor    : Lower bound on the interval, strictly positive.
    """

    def __init__(self, token: CancellationToken, interval: float = 0.1, floor: float = 0.005):
        if floor <= 0:
            raise ValueError("floor must be positive")
        self.token = token
        self.floor = floor
        self.interval = max(floor, interval)

    def set_interval(self, seconds: float) -> None:
        self.interval = max(self.floor, seconds)

    async def step(self) -> Signal:
        if self.token.is_canceled():
            return Signal.CANCELED
        try:
            await asyncio.wait_for(self.token.wait(), timeout=self.interval)
        except asyncio.TimeoutError:
            pass
        return Signal.CANCELED if self.token.is_canceled() else Signal.RESUME
