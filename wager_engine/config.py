from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str
    REDIS_URL: str = "redis://localhost:6379"
    LOG_LEVEL: str = "INFO"

    MIN_BET: int = 1
    MAX_BET: int = 50000
    PRESENTATION_DELAY: float = 0.8
    LEDGER_TIMEOUT: float = 5.0
    UNSYNCED_LIMIT: int = 100

    # Mines board
    MINES_GRID: int = 25
    MINES_COUNT: int = 5
    MINES_STEP: float = 0.3

    # Crash curve: mult(t) = e^(CRASH_GROWTH * t_ms), crash point uniform in [1, CRASH_MAX)
    CRASH_MAX: float = 10.0
    CRASH_TICK: float = 0.1
    CRASH_GROWTH: float = 0.00006

    RACE_FINISH: int = 20

    ALLOWED_ORIGINS: str = "http://localhost:3000"
    RATE_LIMIT_PER_MINUTE: int = 30

    @property
    def origins_list(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"

settings = Settings()
