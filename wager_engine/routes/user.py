from fastapi import APIRouter, Depends, Query, Request

from wager_engine.dependencies import get_controller, get_ledger
from wager_engine.middleware.session import get_current_user_id
from wager_engine.services.ledger import LedgerClient
from wager_engine.services.round_controller import RoundController

router = APIRouter()

@router.get("/history")
async def get_history(request: Request, limit: int = Query(20, ge=1, le=100),
                      ledger: LedgerClient = Depends(get_ledger)):
    uid = await get_current_user_id(request)
    records = await ledger.history(uid, limit)
    return {"rounds": [r.to_dict() for r in records]}

@router.get("/unsynced")
async def get_unsynced(controller: RoundController = Depends(get_controller)):
    return {"rounds": [r.to_dict() for r in controller.unsynced]}
