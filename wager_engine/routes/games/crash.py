from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional

from wager_engine.dependencies import get_controller
from wager_engine.errors import NoActiveRound
from wager_engine.services.round_controller import RoundController

router = APIRouter()

class CrashStartRequest(BaseModel):
    amount: int
    auto_cashout: Optional[float] = None

@router.post("/start")
async def crash_start(body: CrashStartRequest, controller: RoundController = Depends(get_controller)):
    choice = str(body.auto_cashout) if body.auto_cashout is not None else None
    return await controller.start_live("crash", body.amount, choice)

@router.post("/cashout")
async def crash_cashout(controller: RoundController = Depends(get_controller)):
    result = await controller.cash_out()
    return result.to_dict()

@router.get("/state")
async def crash_state(controller: RoundController = Depends(get_controller)):
    state = controller.live_state()
    if not state or state["game"] != "crash":
        raise NoActiveRound("No crash round for this session")
    if controller.state.ready and controller.last_result:
        state["result"] = controller.last_result.to_dict()
    return state
