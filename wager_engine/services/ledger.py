"""
Ledger of record.

``LedgerClient`` is the narrow contract the round engine talks to.
``PostgresLedger`` implements it on the users / rounds / transactions tables.
Every failure (transport, timeout, rejection) surfaces as ``LedgerUnavailable``.
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from typing import List

import asyncpg

from wager_engine.config import settings
from wager_engine.database import get_pool
from wager_engine.errors import LedgerUnavailable
from wager_engine.models import LedgerRecord

logger = logging.getLogger("wager_engine.ledger")


class LedgerClient(ABC):

    @abstractmethod
    async def record_round(self, user_id: int, round_id: str, game_id: str, amount: int,
                           outcome_label: str, profit_loss: int) -> str:
        """Record a completed round, returning its id. Recording the same round_id twice is a no-op."""

    @abstractmethod
    async def refresh_balance(self, user_id: int) -> int:
        """Current authoritative balance."""

    @abstractmethod
    async def history(self, user_id: int, limit: int = 20) -> List[LedgerRecord]:
        """Most recent rounds first."""


class PostgresLedger(LedgerClient):

    def __init__(self, pool_factory=get_pool, timeout: float = None):
        self._pool_factory = pool_factory
        self.timeout = timeout if timeout is not None else settings.LEDGER_TIMEOUT

    async def _call(self, op, *args):
        try:
            return await asyncio.wait_for(op(*args), self.timeout)
        except LedgerUnavailable:
            raise
        except asyncio.TimeoutError as e:
            raise LedgerUnavailable(f"ledger timed out after {self.timeout}s") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise LedgerUnavailable(f"{type(e).__name__}: {e}") from e

    async def record_round(self, user_id, round_id, game_id, amount, outcome_label, profit_loss):
        return await self._call(self._record_round, user_id, round_id, game_id,
                                amount, outcome_label, profit_loss)

    async def refresh_balance(self, user_id):
        return await self._call(self._refresh_balance, user_id)

    async def history(self, user_id, limit=20):
        return await self._call(self._history, user_id, limit)

    async def _record_round(self, user_id, round_id, game_id, amount, outcome_label, profit_loss):
        rid = uuid.UUID(round_id)
        pool = await self._pool_factory()
        async with pool.acquire() as conn:
            async with conn.transaction():
                existing = await conn.fetchval("SELECT round_id FROM rounds WHERE round_id=$1", rid)
                if existing is not None:
                    logger.info("round %s already recorded, skipping", round_id)
                    return str(existing)

                row = await conn.fetchrow("SELECT gold FROM users WHERE id=$1 FOR UPDATE", user_id)
                if not row:
                    raise LedgerUnavailable(f"user {user_id} not found", code="user_not_found")
                if row["gold"] + profit_loss < 0:
                    raise LedgerUnavailable("balance cannot cover the loss", code="ledger_rejected")

                await conn.execute("UPDATE users SET gold = gold + $1 WHERE id=$2", profit_loss, user_id)
                await conn.execute(
                    "INSERT INTO rounds(round_id,user_id,game,bet_amount,outcome,profit) "
                    "VALUES($1,$2,$3,$4,$5,$6)",
                    rid, user_id, game_id, amount, outcome_label[:128], profit_loss
                )
                await conn.execute(
                    "INSERT INTO transactions(user_id,type,amount,description,game) VALUES($1,$2,$3,$4,$5)",
                    user_id, "win" if profit_loss >= 0 else "loss", profit_loss,
                    outcome_label[:128], game_id
                )
                await conn.execute(
                    """
                    UPDATE users SET
                        games_played  = games_played + 1,
                        games_won     = games_won + $1,
                        total_wagered = total_wagered + $2,
                        total_profit  = total_profit + $3
                    WHERE id=$4
                    """,
                    1 if profit_loss >= 0 else 0, amount, profit_loss, user_id
                )
        return round_id

    async def _refresh_balance(self, user_id):
        pool = await self._pool_factory()
        async with pool.acquire() as conn:
            gold = await conn.fetchval("SELECT gold FROM users WHERE id=$1", user_id)
        if gold is None:
            raise LedgerUnavailable(f"user {user_id} not found", code="user_not_found")
        return int(gold)

    async def _history(self, user_id, limit):
        pool = await self._pool_factory()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT round_id, game, bet_amount, outcome, profit, created_at FROM rounds "
                "WHERE user_id=$1 ORDER BY created_at DESC LIMIT $2",
                user_id, limit
            )
        return [
            LedgerRecord(
                round_id=str(r["round_id"]), game_id=r["game"], amount=r["bet_amount"],
                outcome_label=r["outcome"], profit_loss=r["profit"], timestamp=r["created_at"],
            )
            for r in rows
        ]
