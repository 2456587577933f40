from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wager_engine.dependencies import get_controller
from wager_engine.games import CATALOG, definition_for
from wager_engine.services.round_controller import RoundController

router = APIRouter()

class PlayRequest(BaseModel):
    amount: int
    choice: str

@router.get("")
async def list_games():
    return {"games": [g.to_dict() for g in CATALOG.values()]}

@router.get("/{game_id}")
async def get_game(game_id: str):
    return definition_for(game_id).to_dict()

@router.post("/{game_id}/play")
async def play(game_id: str, body: PlayRequest, controller: RoundController = Depends(get_controller)):
    result = await controller.place_bet(game_id, body.amount, body.choice)
    return result.to_dict()
