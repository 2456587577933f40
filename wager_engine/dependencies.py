from fastapi import Depends, Request

from wager_engine.middleware.session import get_current_user_id
from wager_engine.services.daily_bonus import DailyBonus
from wager_engine.services.keyed_store import RedisKeyedStore
from wager_engine.services.ledger import LedgerClient, PostgresLedger
from wager_engine.services.round_controller import RoundController
from wager_engine.services.sessions import SessionRegistry

_ledger: LedgerClient = None
_sessions: SessionRegistry = None
_bonus: DailyBonus = None

def get_ledger() -> LedgerClient:
    global _ledger
    if _ledger is None:
        _ledger = PostgresLedger()
    return _ledger

def get_sessions(ledger: LedgerClient = Depends(get_ledger)) -> SessionRegistry:
    global _sessions
    if _sessions is None:
        _sessions = SessionRegistry(ledger)
    return _sessions

def get_daily_bonus() -> DailyBonus:
    global _bonus
    if _bonus is None:
        _bonus = DailyBonus(RedisKeyedStore())
    return _bonus

async def get_controller(request: Request,
                         sessions: SessionRegistry = Depends(get_sessions)) -> RoundController:
    uid = await get_current_user_id(request)
    return await sessions.get(uid)
