import asyncio
import time

import pytest

from engine import CancellationToken, Pacer, Signal, pacing_interval


@pytest.mark.asyncio
async def test_step_resumes_after_interval():
    pacer = Pacer(CancellationToken(), interval=0.02)
    started = time.monotonic()
    assert await pacer.step() is Signal.RESUME
    assert time.monotonic() - started >= 0.015


@pytest.mark.asyncio
async def test_canceled_token_returns_immediately():
    token = CancellationToken()
    token.cancel()
    pacer = Pacer(token, interval=5.0)
    started = time.monotonic()
    assert await pacer.step() is Signal.CANCELED
    assert time.monotonic() - started < 0.5


@pytest.mark.asyncio
async def test_cancel_wakes_sleeping_pacer():
    token = CancellationToken()
    pacer = Pacer(token, interval=5.0)
    asyncio.get_running_loop().call_later(0.02, token.cancel)

    started = time.monotonic()
    assert await pacer.step() is Signal.CANCELED
    assert time.monotonic() - started < 1.0


def test_interval_never_below_floor():
    pacer = Pacer(CancellationToken(), interval=0.0, floor=0.005)
    assert pacer.interval == 0.005
    pacer.set_interval(-1)
    assert pacer.interval == 0.005


def test_floor_must_be_positive():
    with pytest.raises(ValueError):
        Pacer(CancellationToken(), floor=0)


def test_pacing_interval_formula():
    assert pacing_interval(50, 5) == pytest.approx(0.1)
    assert pacing_interval(100, 5) == pytest.approx(0.005)
    assert pacing_interval(1, 5) == pytest.approx(0.198)
