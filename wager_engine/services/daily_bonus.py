from datetime import date, timedelta
from typing import Callable

from wager_engine.errors import AlreadyClaimed
from wager_engine.services.keyed_store import KeyedStore

DAILY_REWARDS = [5, 10, 15, 20, 25, 30, 50]


class DailyBonus:
    """Daily check-in streak. Tracks what was claimed; paying it out is the deposit flow's job."""

    def __init__(self, store: KeyedStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkin:{user_id}"

    async def _load(self, user_id: int) -> dict:
        data = await self.store.get(self._key(user_id))
        return data or {"last_checkin": None, "streak": 0, "total_claimed": 0}

    def _current_streak(self, data: dict) -> int:
        last = data["last_checkin"]
        if last is None:
            return 0
        # A missed day breaks the streak.
        if date.fromisoformat(last) < self.today() - timedelta(days=1):
            return 0
        return data["streak"]

    async def status(self, user_id: int) -> dict:
        data = await self._load(user_id)
        streak = self._current_streak(data)
        return {
            "streak":        streak,
            "total_claimed": data["total_claimed"],
            "last_checkin":  data["last_checkin"],
            "can_claim":     data["last_checkin"] != self.today().isoformat(),
            "today_reward":  DAILY_REWARDS[min(streak, len(DAILY_REWARDS) - 1)],
        }

    async def claim(self, user_id: int) -> dict:
        data = await self._load(user_id)
        today = self.today().isoformat()
        if data["last_checkin"] == today:
            raise AlreadyClaimed("Today's bonus was already claimed")

        streak = self._current_streak(data)
        reward = DAILY_REWARDS[min(streak, len(DAILY_REWARDS) - 1)]
        data = {"last_checkin": today, "streak": streak + 1, "total_claimed": data["total_claimed"] + reward}
        await self.store.put(self._key(user_id), data)
        return {"reward": reward, **data}
