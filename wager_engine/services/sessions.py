import asyncio
from typing import Callable, Dict

from wager_engine.rng import RandomSource, SecretsSource
from wager_engine.services.balance_store import BalanceStore
from wager_engine.services.ledger import LedgerClient
from wager_engine.services.round_controller import RoundController


class SessionRegistry:
    """One RoundController per user, seeded from the ledger on first use."""

    def __init__(self, ledger: LedgerClient, rng_factory: Callable[[], RandomSource] = SecretsSource,
                 presentation_delay: float = None):
        self.ledger = ledger
        self._rng_factory = rng_factory
        self._presentation_delay = presentation_delay
        self._controllers: Dict[int, RoundController] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: int) -> RoundController:
        async with self._lock:
            controller = self._controllers.get(user_id)
            if controller is None:
                balance = await self.ledger.refresh_balance(user_id)
                controller = RoundController(
                    user_id, self.ledger, BalanceStore(balance),
                    rng=self._rng_factory(), presentation_delay=self._presentation_delay,
                )
                self._controllers[user_id] = controller
            return controller
