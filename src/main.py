"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.ce_coins.api.router import router as coins_router
from src.ce_common.database import engine
from src.ce_common.economy import get_economy
from src.ce_common.errors import AppError
from src.ce_common.redis_client import close_redis, get_redis, ping_redis
from src.ce_common.response import error_response
from src.ce_earnings.api.processor_router import router as processor_router
from src.ce_earnings.api.router import router as earnings_router
from src.ce_gateway.api.router import router as auth_router
from src.ce_gateway.middleware.request_log import RequestLogMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    economy = get_economy()
    logger.info(
        "Coin economy: %d coins/unit, split %d/%d, minimum payout %d cents",
        economy.coins_per_unit,
        economy.platform_percent,
        economy.creator_percent,
        economy.minimum_payout_cents,
    )
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(coins_router, prefix="/api/v1")
app.include_router(earnings_router, prefix="/api/v1")
app.include_router(processor_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    redis_ok = await ping_redis()
    return {"status": "ok" if redis_ok else "degraded", "version": "0.1.0"}
