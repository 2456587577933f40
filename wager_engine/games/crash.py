"""
Crash — an ascending multiplier that dies at a random crash point.

Preset rounds pick a cash-out target up front and are resolved in one draw.
Live rounds run a ``CrashFlight``: a clock pushes ticks and the player pushes
cash-out requests into the same queue, and a single consumer settles them.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Optional

from wager_engine.config import settings
from wager_engine.errors import ValidationError
from wager_engine.games.base import CashoutMultiplier, GameDefinition, GameResolver, LiveRound, RawOutcome

logger = logging.getLogger("wager_engine.crash")

TARGETS = ("1.5", "2", "3", "5")

TICK = "tick"
CASHOUT = "cashout"


def calc_mult(elapsed_ms: float, growth: float) -> float:
    """mult(t) = e^(growth * t_ms), two decimals, same curve the client animates."""
    return round(math.exp(growth * elapsed_ms), 2)


@dataclass(frozen=True)
class CrashOutcome(RawOutcome):
    crash_point: float
    cashout: Optional[float]

    @property
    def label(self) -> str:
        if self.cashout is not None and self.cashout <= self.crash_point:
            return f"Cash out {self.cashout}x | Crash: {self.crash_point:.2f}x"
        return f"Crash: {self.crash_point:.2f}x"


class CrashResolver(GameResolver):

    def __init__(self, cap: float, tick: float, growth: float):
        self.cap = cap
        self.tick = tick
        self.growth = growth

    def crash_point(self, rng) -> float:
        return rng.uniform(1.0, self.cap)

    def resolve(self, bet, rng):
        return CrashOutcome(crash_point=self.crash_point(rng), cashout=float(bet.choice))

    def validate_live_choice(self, choice):
        if choice is None:
            return
        try:
            target = float(choice)
        except (TypeError, ValueError):
            raise ValidationError(f"Auto cash-out {choice!r} is not a number", code="invalid_choice")
        if not (1.0 < target < self.cap):
            raise ValidationError(f"Auto cash-out must be between 1 and {self.cap}", code="invalid_choice")

    def open_live(self, bet, rng):
        auto = float(bet.choice) if bet.choice is not None else None
        return CrashFlight(self.crash_point(rng), self.tick, self.growth, auto_cashout=auto)


class CrashFlight(LiveRound):
    """One live crash round.

    Ticks and cash-outs go through one queue. Everything that is ready in the
    same scheduling turn is handled as a batch: ticks (and their crash check)
    first, then cash-outs, so a tick that crosses the crash point beats a
    simultaneous cash-out. ``clock=False`` leaves ticking to the caller.
    """

    def __init__(self, crash_point: float, tick: float, growth: float,
                 auto_cashout: Optional[float] = None, clock: bool = True):
        super().__init__()
        self.crash_point = crash_point
        self.tick_interval = tick
        self.growth = growth
        self.auto_cashout = auto_cashout
        self.ticks = 0
        self.multiplier = 1.0
        self._clock = clock
        self._events: asyncio.Queue = asyncio.Queue()
        self._tasks = []

    @property
    def phase(self) -> str:
        if not self.finished:
            return "running"
        return "cashed_out" if self._done.result().cashout is not None else "crashed"

    async def start(self):
        self._tasks.append(asyncio.create_task(self._consume()))
        if self._clock:
            self._tasks.append(asyncio.create_task(self._run_clock()))

    def tick(self):
        self._events.put_nowait(TICK)

    def request_cashout(self):
        if self.finished:
            raise ValidationError("Round is already over", code="wrong_phase")
        self._events.put_nowait(CASHOUT)

    async def cash_out(self) -> CrashOutcome:
        self.request_cashout()
        return await self.outcome()

    async def _run_clock(self):
        while not self.finished:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    async def _consume(self):
        while not self.finished:
            batch = [await self._events.get()]
            while not self._events.empty():
                batch.append(self._events.get_nowait())

            for _ in range(batch.count(TICK)):
                self._advance()
                if self.finished:
                    break
            if not self.finished and CASHOUT in batch:
                self._finish(CrashOutcome(self.crash_point, cashout=self.multiplier))

        for task in self._tasks:
            if task is not asyncio.current_task():
                task.cancel()

    def _advance(self):
        self.ticks += 1
        mult = calc_mult(self.ticks * self.tick_interval * 1000, self.growth)
        # An auto target at or below the crash point pays even if this tick overshoots both.
        if (self.auto_cashout is not None and self.auto_cashout <= self.crash_point
                and mult >= self.auto_cashout):
            self.multiplier = self.auto_cashout
            self._finish(CrashOutcome(self.crash_point, cashout=self.auto_cashout))
            return
        if mult >= self.crash_point:
            self.multiplier = round(self.crash_point, 2)
            logger.debug("crash at %.2fx after %d ticks", self.crash_point, self.ticks)
            self._finish(CrashOutcome(self.crash_point, cashout=None))
            return
        self.multiplier = mult

    def snapshot(self) -> dict:
        state = {
            "game":       "crash",
            "phase":      self.phase,
            "multiplier": self.multiplier,
            "auto_cashout": self.auto_cashout,
        }
        if self.finished:
            state["crash_point"] = round(self.crash_point, 2)
        return state


DEFINITION = GameDefinition(
    id="crash",
    display_name="Crash",
    description="The multiplier climbs until it crashes; cash out before it does.",
    choices=TARGETS,
    payout_rule=CashoutMultiplier(settings.CRASH_MAX),
    resolver=CrashResolver(settings.CRASH_MAX, settings.CRASH_TICK, settings.CRASH_GROWTH),
    live=True,
)
