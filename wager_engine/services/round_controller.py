"""
Round controller — one wager round at a time for one session.

    IDLE → BET_PLACED → RESOLVING → SETTLED → RECONCILING → RECONCILED | UNSYNCED

IDLE, RECONCILED and UNSYNCED are ready states; a bet placed in any other
state is rejected with ``RoundInProgress``. Once resolving starts the round
runs in its own task, so a caller that goes away does not cancel it.

Settlement is optimistic: the balance store moves as soon as the payout is
known. The ledger is then asked to record the round; if it fails the local
result stands, the round is kept in ``unsynced`` and is not retried. Only the
newest ``UNSYNCED_LIMIT`` unsynced rounds are kept.
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from wager_engine.config import settings
from wager_engine.errors import (InsufficientFunds, LedgerUnavailable, NoActiveRound,
                                 RoundInProgress, ValidationError)
from wager_engine.games import definition_for
from wager_engine.games.base import GameDefinition, LiveRound, RawOutcome
from wager_engine.models import BetRequest, RoundResult, RoundState
from wager_engine.rng import RandomSource, SecretsSource
from wager_engine.services.balance_store import BalanceStore
from wager_engine.services.ledger import LedgerClient
from wager_engine.services.payout import settle

logger = logging.getLogger("wager_engine.rounds")


class RoundController:

    def __init__(self, user_id: int, ledger: LedgerClient, balance: BalanceStore,
                 rng: RandomSource = None, presentation_delay: float = None):
        self.user_id = user_id
        self.ledger = ledger
        self.balance = balance
        self.rng = rng or SecretsSource()
        self.presentation_delay = (settings.PRESENTATION_DELAY
                                   if presentation_delay is None else presentation_delay)

        self.state = RoundState.IDLE
        self.unsynced: List[RoundResult] = []
        self.last_result: Optional[RoundResult] = None
        self.rounds_played = 0
        self.total_winnings = 0

        self._live: Optional[LiveRound] = None
        self._round_task: Optional[asyncio.Task] = None

    # ─── Bet intake ────────────────────────────────────────────────────────────

    def _accept(self, game_id: str, amount, choice, live: bool = False):
        if not self.state.ready:
            raise RoundInProgress(f"Previous round is still {self.state.value}")

        game = definition_for(game_id)
        if live:
            if not game.live:
                raise ValidationError(f"{game.display_name} has no live mode", code="no_live_mode")
            game.resolver.validate_live_choice(choice)
        else:
            game.validate_choice(choice)

        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValidationError("Bet must be a positive whole amount", code="invalid_amount")
        if amount < settings.MIN_BET:
            raise ValidationError(f"Minimum bet is {settings.MIN_BET}", code="bet_too_low")
        if amount > settings.MAX_BET:
            raise ValidationError(f"Maximum bet is {settings.MAX_BET}", code="bet_too_high")
        if amount > self.balance.optimistic:
            raise InsufficientFunds(f"Bet {amount} exceeds balance {self.balance.optimistic}")

        self.state = RoundState.BET_PLACED
        return game, BetRequest(game_id=game.id, amount=amount, choice=choice)

    async def place_bet(self, game_id: str, amount: int, choice: str) -> RoundResult:
        """Play a preset round start to finish."""
        game, bet = self._accept(game_id, amount, choice)
        self._live = None
        self._round_task = asyncio.create_task(self._play(game, bet, str(uuid.uuid4())))
        return await asyncio.shield(self._round_task)

    async def start_live(self, game_id: str, amount: int, choice: Optional[str] = None) -> dict:
        """Open a live round; the player finishes it with ``cash_out`` / ``reveal``."""
        game, bet = self._accept(game_id, amount, choice, live=True)
        round_id = str(uuid.uuid4())
        self.state = RoundState.RESOLVING
        try:
            live = game.resolver.open_live(bet, self.rng)
            await live.start()
        except Exception:
            self.state = RoundState.IDLE
            raise
        self._live = live
        self._round_task = asyncio.create_task(self._play_live(game, bet, round_id, live))
        logger.info("user %s opened live %s round %s for %d", self.user_id, game.id, round_id, bet.amount)
        return {"round_id": round_id, **live.snapshot()}

    # ─── Live actions ──────────────────────────────────────────────────────────

    def _require_live(self) -> LiveRound:
        if self._live is None or self.state != RoundState.RESOLVING:
            raise NoActiveRound("No live round in progress")
        return self._live

    async def cash_out(self) -> RoundResult:
        live = self._require_live()
        await live.cash_out()
        return await self.wait_round()

    async def reveal(self, cell: int) -> dict:
        live = self._require_live()
        step = await live.reveal(cell)
        if live.finished:
            step["result"] = (await self.wait_round()).to_dict()
        return step

    def live_state(self) -> Optional[dict]:
        if self._live is None:
            return None
        return {"state": self.state.value, **self._live.snapshot()}

    async def wait_round(self) -> RoundResult:
        if self._round_task is None:
            raise NoActiveRound("No round has been played")
        return await asyncio.shield(self._round_task)

    # ─── Resolution, settlement, reconciliation ───────────────────────────────

    async def _play(self, game: GameDefinition, bet: BetRequest, round_id: str) -> RoundResult:
        self.state = RoundState.RESOLVING
        try:
            if self.presentation_delay > 0:
                await asyncio.sleep(self.presentation_delay)
            raw = game.resolver.resolve(bet, self.rng)
        except Exception:
            self.state = RoundState.IDLE
            raise
        return await self._settle(game, bet, round_id, raw)

    async def _play_live(self, game, bet, round_id, live: LiveRound) -> RoundResult:
        raw = await live.outcome()
        return await self._settle(game, bet, round_id, raw)

    async def _settle(self, game: GameDefinition, bet: BetRequest, round_id: str,
                      raw: RawOutcome) -> RoundResult:
        outcome = settle(game, bet, raw, self.balance.optimistic)
        self.balance.apply(outcome.profit_loss)
        self.state = RoundState.SETTLED
        self.rounds_played += 1
        if outcome.win:
            self.total_winnings += outcome.profit_loss
        logger.info("user %s %s %s on %s: %s (%+d)", self.user_id, "won" if outcome.win else "lost",
                    bet.amount, game.id, raw.label, outcome.profit_loss)

        self.state = RoundState.RECONCILING
        warning = None
        try:
            await self.ledger.record_round(self.user_id, round_id, game.id, bet.amount,
                                           raw.label, outcome.profit_loss)
            authoritative = await self.ledger.refresh_balance(self.user_id)
        except LedgerUnavailable as e:
            logger.warning("round %s for user %s left unsynced: %s", round_id, self.user_id, e.message)
            self.state = RoundState.UNSYNCED
            warning = e.code
        except Exception:
            logger.exception("ledger call failed, round %s for user %s left unsynced", round_id, self.user_id)
            self.state = RoundState.UNSYNCED
            warning = LedgerUnavailable.code
        else:
            self.balance.reconcile(authoritative)
            self.state = RoundState.RECONCILED
        finally:
            if self.state == RoundState.RECONCILING:
                self.state = RoundState.UNSYNCED

        result = RoundResult(
            round_id=round_id, game_id=game.id, amount=bet.amount, choice=bet.choice,
            outcome_label=raw.label, win=outcome.win, profit_loss=outcome.profit_loss,
            balance=self.balance.balance, state=self.state, details=raw.details(), warning=warning,
        )
        if self.state == RoundState.UNSYNCED:
            self.unsynced.append(result)
            if len(self.unsynced) > settings.UNSYNCED_LIMIT:
                dropped = self.unsynced.pop(0)
                logger.warning("user %s has over %d unsynced rounds, dropping %s",
                               self.user_id, settings.UNSYNCED_LIMIT, dropped.round_id)
        self.last_result = result
        return result

    def stats(self) -> dict:
        return {
            "state":          self.state.value,
            "rounds_played":  self.rounds_played,
            "total_winnings": self.total_winnings,
            "unsynced":       len(self.unsynced),
        }
