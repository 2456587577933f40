import json

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from wager_engine.dependencies import get_controller
from wager_engine.services.round_controller import RoundController

router = APIRouter()

@router.get("/balance")
async def get_balance(controller: RoundController = Depends(get_controller)):
    return {**controller.balance.balance.to_dict(), **controller.stats()}

@router.get("/stream")
async def stream_balance(controller: RoundController = Depends(get_controller)):
    async def events():
        async for balance in controller.balance.subscribe():
            yield f"data: {json.dumps(balance.to_dict())}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")
