"""
/health. 로그인 경로가 의존하는 두 저장소 상태.
db: users/user_profiles가 있는 DB, redis: 네이버 OAuth state 저장소(미설정이면 disabled).
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from sqlalchemy import text

from app.core.database import get_async_session_maker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

PROBE_TIMEOUT_SECONDS = 2.0


async def _user_store_status() -> str:
    maker = get_async_session_maker()
    if maker is None:
        return "error"
    try:
        async with maker() as session:
            await asyncio.wait_for(session.execute(text("SELECT 1")), PROBE_TIMEOUT_SECONDS)
    except Exception as e:
        logger.warning("Health: user store unreachable: %s", e)
        return "error"
    return "ok"


async def _state_store_status(request: Request) -> str:
    redis_client = getattr(request.app.state, "redis_client", None)
    if redis_client is None:
        return "disabled"
    try:
        await asyncio.wait_for(redis_client.ping(), PROBE_TIMEOUT_SECONDS)
    except Exception as e:
        logger.warning("Health: OAuth state store unreachable: %s", e)
        return "error"
    return "ok"


@router.get("/health")
async def get_health(request: Request) -> dict[str, str]:
    """두 저장소를 동시에 확인. 하나라도 error면 degraded(응답 코드는 200 유지)."""
    db_status, redis_status = await asyncio.gather(
        _user_store_status(), _state_store_status(request)
    )
    return {
        "status": "degraded" if "error" in (db_status, redis_status) else "ok",
        "db": db_status,
        "redis": redis_status,
    }
