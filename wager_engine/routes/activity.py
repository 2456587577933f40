from fastapi import APIRouter, Depends, Request

from wager_engine.dependencies import get_daily_bonus
from wager_engine.middleware.session import get_current_user_id
from wager_engine.services.daily_bonus import DAILY_REWARDS, DailyBonus

router = APIRouter()

@router.get("/checkin")
async def checkin_status(request: Request, bonus: DailyBonus = Depends(get_daily_bonus)):
    uid = await get_current_user_id(request)
    return {**await bonus.status(uid), "rewards": DAILY_REWARDS}

@router.post("/checkin")
async def checkin_claim(request: Request, bonus: DailyBonus = Depends(get_daily_bonus)):
    uid = await get_current_user_id(request)
    return await bonus.claim(uid)
