from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from wager_engine.database import create_tables, close_pool
from wager_engine.redis_client import get_redis, close_redis, over_rate_limit
from wager_engine.config import settings
from wager_engine.errors import WagerError
from wager_engine.routes import activity, user, wallet
from wager_engine.routes.games import play, crash, mines

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("wager_engine")

@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    redis = await get_redis()
    await redis.ping()
    logger.info("wager engine ready")
    yield
    await close_redis()
    await close_pool()

app = FastAPI(title="Wager Engine API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting middleware (simple Redis-based)
@app.middleware("http")
async def rate_limit(request: Request, call_next):
    uid = request.headers.get("X-User-Id")
    if settings.RATE_LIMIT_PER_MINUTE > 0 and uid and request.url.path.startswith("/api/"):
        if await over_rate_limit(uid, settings.RATE_LIMIT_PER_MINUTE):
            return JSONResponse({"error": "rate_limited", "message": "Too many requests"}, status_code=429)
    return await call_next(request)

@app.exception_handler(WagerError)
async def wager_error_handler(request: Request, exc: WagerError):
    return JSONResponse({"detail": exc.to_dict()}, status_code=exc.status_code)

app.include_router(user.router,     prefix="/api/user",          tags=["user"])
app.include_router(wallet.router,   prefix="/api/wallet",        tags=["wallet"])
app.include_router(activity.router, prefix="/api/activity",      tags=["activity"])
app.include_router(crash.router,    prefix="/api/games/crash",   tags=["games"])
app.include_router(mines.router,    prefix="/api/games/mines",   tags=["games"])
app.include_router(play.router,     prefix="/api/games",         tags=["games"])

@app.get("/health")
async def health():
    return {"status": "ok"}
