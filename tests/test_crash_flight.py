import asyncio

import pytest

from wager_engine.errors import ValidationError
from wager_engine.games.crash import CrashFlight, calc_mult

# growth 0.001 per ms with 100 ms ticks: 1.11, 1.22, 1.35, 1.49, ...
GROWTH = 0.001
TICK = 0.1


async def flight(crash_point, auto_cashout=None):
    f = CrashFlight(crash_point, TICK, GROWTH, auto_cashout=auto_cashout, clock=False)
    await f.start()
    return f


def test_calc_mult_curve():
    assert calc_mult(0, GROWTH) == 1.0
    assert calc_mult(100, GROWTH) == 1.11
    assert calc_mult(300, GROWTH) == 1.35


@pytest.mark.asyncio
async def test_cash_out_at_displayed_multiplier():
    f = await flight(3.0)
    for _ in range(3):
        f.tick()
    await asyncio.sleep(0)
    assert f.multiplier == 1.35

    raw = await f.cash_out()

    assert raw.cashout == 1.35
    assert f.phase == "cashed_out"


@pytest.mark.asyncio
async def test_crash_check_beats_cash_out_in_same_turn():
    f = await flight(1.05)
    # cash-out queued first, the crossing tick right behind it
    f.request_cashout()
    f.tick()

    raw = await asyncio.wait_for(f.outcome(), 1)

    assert raw.cashout is None
    assert f.phase == "crashed"
    assert f.multiplier == 1.05


@pytest.mark.asyncio
async def test_cash_out_wins_when_tick_does_not_cross():
    f = await flight(2.0)
    f.request_cashout()
    f.tick()

    raw = await asyncio.wait_for(f.outcome(), 1)

    assert raw.cashout == 1.11


@pytest.mark.asyncio
async def test_auto_cashout_triggers_on_target():
    f = await flight(3.0, auto_cashout=1.2)
    f.tick()
    f.tick()

    raw = await asyncio.wait_for(f.outcome(), 1)

    assert raw.cashout == 1.2
    assert f.ticks == 2


@pytest.mark.asyncio
async def test_crash_before_auto_cashout():
    f = await flight(1.15, auto_cashout=1.2)
    f.tick()
    f.tick()

    raw = await asyncio.wait_for(f.outcome(), 1)

    assert raw.cashout is None


@pytest.mark.asyncio
async def test_auto_cashout_pays_when_tick_overshoots_crash_point():
    # second tick jumps from 1.11 to 1.22, past both the 1.2 target and the 1.21 crash
    f = await flight(1.21, auto_cashout=1.2)
    f.tick()
    f.tick()

    raw = await asyncio.wait_for(f.outcome(), 1)

    assert raw.cashout == 1.2
    assert f.phase == "cashed_out"
    assert f.multiplier == 1.2


@pytest.mark.asyncio
async def test_cash_out_after_crash_is_rejected():
    f = await flight(1.05)
    f.tick()
    await asyncio.wait_for(f.outcome(), 1)

    with pytest.raises(ValidationError) as exc:
        await f.cash_out()
    assert exc.value.code == "wrong_phase"


@pytest.mark.asyncio
async def test_clock_drives_flight_to_crash():
    f = CrashFlight(1.2, 0.005, GROWTH)
    await f.start()

    raw = await asyncio.wait_for(f.outcome(), 2)

    assert raw.cashout is None
    assert f.snapshot()["crash_point"] == 1.2
