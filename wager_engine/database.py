import asyncpg
from wager_engine.config import settings

_pool: asyncpg.Pool = None

async def get_pool() -> asyncpg.Pool:
    global _pool
    if _pool is None:
        _pool = await asyncpg.create_pool(settings.DATABASE_URL, min_size=2, max_size=10)
    return _pool

async def close_pool():
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None

async def create_tables():
    pool = await get_pool()
    async with pool.acquire() as conn:
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS users (
                id            BIGINT PRIMARY KEY,
                name          VARCHAR(64),
                gold          BIGINT DEFAULT 0,
                games_played  INT DEFAULT 0,
                games_won     INT DEFAULT 0,
                total_wagered BIGINT DEFAULT 0,
                total_profit  BIGINT DEFAULT 0,
                created_at    TIMESTAMP DEFAULT NOW()
            );
            CREATE TABLE IF NOT EXISTS transactions (
                id          SERIAL PRIMARY KEY,
                user_id     BIGINT REFERENCES users(id),
                type        VARCHAR(32),
                amount      BIGINT,
                description VARCHAR(128),
                game        VARCHAR(32),
                created_at  TIMESTAMP DEFAULT NOW()
            );
            CREATE TABLE IF NOT EXISTS rounds (
                round_id    UUID PRIMARY KEY,
                user_id     BIGINT REFERENCES users(id),
                game        VARCHAR(32),
                bet_amount  BIGINT,
                outcome     VARCHAR(128),
                profit      BIGINT,
                created_at  TIMESTAMP DEFAULT NOW()
            );
            CREATE INDEX IF NOT EXISTS rounds_user_idx ON rounds (user_id, created_at DESC);
        ''')
