from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wager_engine.dependencies import get_controller
from wager_engine.services.round_controller import RoundController

router = APIRouter()

class MinesStartRequest(BaseModel):
    amount: int

class MinesRevealRequest(BaseModel):
    cell: int

@router.post("/start")
async def mines_start(body: MinesStartRequest, controller: RoundController = Depends(get_controller)):
    return await controller.start_live("mines", body.amount)

@router.post("/reveal")
async def mines_reveal(body: MinesRevealRequest, controller: RoundController = Depends(get_controller)):
    return await controller.reveal(body.cell)

@router.post("/cashout")
async def mines_cashout(controller: RoundController = Depends(get_controller)):
    result = await controller.cash_out()
    return result.to_dict()
