import asyncio
from typing import AsyncIterator, List

from wager_engine.models import WalletBalance


class BalanceStore:
    """Displayed (optimistic) and last ledger-confirmed (authoritative) balance of one session."""

    def __init__(self, authoritative: int):
        self._balance = WalletBalance(optimistic=authoritative, authoritative=authoritative, synced=True)
        self._subscribers: List[asyncio.Queue] = []

    @property
    def balance(self) -> WalletBalance:
        return self._balance

    @property
    def optimistic(self) -> int:
        return self._balance.optimistic

    def apply(self, delta: int) -> WalletBalance:
        """Optimistic settlement; the displayed value never drops below zero."""
        b = self._balance
        self._set(WalletBalance(optimistic=max(0, b.optimistic + delta),
                                authoritative=b.authoritative, synced=False))
        return self._balance

    def reconcile(self, authoritative: int) -> WalletBalance:
        self._set(WalletBalance(optimistic=authoritative, authoritative=authoritative, synced=True))
        return self._balance

    def _set(self, balance: WalletBalance):
        self._balance = balance
        for q in self._subscribers:
            q.put_nowait(balance)

    async def subscribe(self) -> AsyncIterator[WalletBalance]:
        """Yield the current balance, then every change until the consumer stops."""
        q: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(q)
        try:
            yield self._balance
            while True:
                yield await q.get()
        finally:
            self._subscribers.remove(q)
