"""
Shared building blocks for the game variants.

A game is a ``GameDefinition``: a fixed choice set, a ``PayoutRule`` and a
``GameResolver`` that turns a validated bet plus a randomness source into an
immutable ``RawOutcome``. Games that are played interactively (crash, mines)
also hand out a ``LiveRound`` the player drives until it finishes.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Dict, Optional, Tuple

from wager_engine.errors import ValidationError
from wager_engine.models import BetRequest, RoundOutcome
from wager_engine.rng import RandomSource


def floor_amount(amount: int, multiplier) -> int:
    """amount × multiplier floored to a whole currency unit."""
    value = Decimal(amount) * Decimal(str(multiplier))
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


class RawOutcome(ABC):
    """Resolved facts of one round. Subclasses are frozen dataclasses."""

    # Choice that this outcome pays, for fixed-odds games.
    winner: Optional[str] = None

    @property
    @abstractmethod
    def label(self) -> str:
        """Human readable outcome, stored as the ledger description."""

    def details(self) -> dict:
        return asdict(self)


# ─── Payout rules ──────────────────────────────────────────────────────────────

class PayoutRule(ABC):

    @abstractmethod
    def evaluate(self, amount: int, choice: Optional[str], raw: RawOutcome) -> RoundOutcome:
        """Unclamped win flag and profit/loss for a resolved round."""

    @abstractmethod
    def max_multiplier(self, choice: Optional[str]) -> float:
        """Bound on |profit_loss| as a multiple of the stake for ``choice``.

        The largest profit multiple the rule pays, never below 1 since a loss
        forfeits the whole stake.
        """


class FixedOdds(PayoutRule):
    """Win iff the outcome names the chosen option; pays ``odds[choice]`` × stake."""

    def __init__(self, odds: Dict[str, int]):
        self.odds = dict(odds)

    def evaluate(self, amount, choice, raw):
        if raw.winner is not None and raw.winner == choice:
            return RoundOutcome(win=True, profit_loss=amount * self.odds[choice])
        return RoundOutcome(win=False, profit_loss=-amount)

    def max_multiplier(self, choice):
        if choice in self.odds:
            return self.odds[choice]
        return max(self.odds.values())


class TileLadder(PayoutRule):
    """Each safe tile adds ``step`` to a 1× multiplier; a mine forfeits the stake."""

    def __init__(self, step: float, max_tiles: int):
        self.step = step
        self.max_tiles = max_tiles

    def multiplier(self, tiles: int) -> Decimal:
        return Decimal(1) + Decimal(str(self.step)) * tiles

    def evaluate(self, amount, choice, raw):
        if raw.hit_mine:
            return RoundOutcome(win=False, profit_loss=-amount)
        payout = floor_amount(amount, self.multiplier(raw.tiles_revealed))
        return RoundOutcome(win=True, profit_loss=payout - amount)

    def max_multiplier(self, choice):
        tiles = int(choice) if choice is not None else self.max_tiles
        return max(1.0, float(Decimal(str(self.step)) * tiles))


class CashoutMultiplier(PayoutRule):
    """Pays ``floor(amount × (cashout − 1))`` when the cash-out came at or below the crash point."""

    def __init__(self, cap: float):
        self.cap = cap

    def evaluate(self, amount, choice, raw):
        if raw.cashout is not None and raw.cashout <= raw.crash_point:
            return RoundOutcome(win=True, profit_loss=floor_amount(amount, Decimal(str(raw.cashout)) - 1))
        return RoundOutcome(win=False, profit_loss=-amount)

    def max_multiplier(self, choice):
        target = float(choice) if choice is not None else self.cap
        return max(1.0, target - 1)


# ─── Resolvers ─────────────────────────────────────────────────────────────────

class GameResolver(ABC):

    @abstractmethod
    def resolve(self, bet: BetRequest, rng: RandomSource) -> RawOutcome:
        """Resolve a preset round in one step."""

    def validate_live_choice(self, choice: Optional[str]) -> None:
        raise ValidationError("This game has no live mode", code="no_live_mode")

    def open_live(self, bet: BetRequest, rng: RandomSource) -> "LiveRound":
        raise ValidationError("This game has no live mode", code="no_live_mode")


class LiveRound(ABC):
    """A round the player drives until it produces its RawOutcome."""

    def __init__(self):
        self._done: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def finished(self) -> bool:
        return self._done.done()

    async def outcome(self) -> RawOutcome:
        return await asyncio.shield(self._done)

    def _finish(self, raw: RawOutcome) -> None:
        if not self._done.done():
            self._done.set_result(raw)

    async def start(self) -> None:
        pass

    @abstractmethod
    async def cash_out(self) -> RawOutcome:
        ...

    async def reveal(self, cell: int) -> dict:
        raise ValidationError("This game has nothing to reveal", code="invalid_action")

    @abstractmethod
    def snapshot(self) -> dict:
        ...


# ─── Catalog entry ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GameDefinition:
    id: str
    display_name: str
    choices: Tuple[str, ...]
    payout_rule: PayoutRule
    resolver: GameResolver
    description: str = ""
    live: bool = False

    def validate_choice(self, choice) -> None:
        if choice not in self.choices:
            raise ValidationError(
                f"Choice {choice!r} is not valid for {self.display_name}", code="invalid_choice"
            )

    def max_multiplier(self, choice: Optional[str] = None) -> float:
        return self.payout_rule.max_multiplier(choice)

    def to_dict(self) -> dict:
        return {
            "id":          self.id,
            "name":        self.display_name,
            "description": self.description,
            "choices":     list(self.choices),
            "live":        self.live,
            "max_multiplier": {c: self.max_multiplier(c) for c in self.choices},
        }
