"""Redis 비동기 클라이언트. OAuth state(CSRF 방지 토큰) 저장·1회성 소비용."""

import logging
from typing import Any

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)

OAUTH_STATE_KEY_PREFIX = "userauth:oauth_state:"


class StateStoreUnavailableError(Exception):
    """Redis 인프라 오류로 state 저장/조회 불가. Router에서 503으로 변환."""

    pass


def create_redis_client() -> Any:
    """
    state 저장용 비동기 Redis 클라이언트. redis_url 없으면 None.
    lifespan에서 한 번 생성해 app.state에 보관.
    """
    if not settings.redis_url:
        return None
    pool = redis.ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
    )
    return redis.Redis(connection_pool=pool)


def _state_key(provider: str, state: str) -> str:
    return f"{OAUTH_STATE_KEY_PREFIX}{provider}:{state}"


async def save_oauth_state(
    client: Any, provider: str, state: str, ttl_seconds: int | None = None
) -> None:
    """발급한 state를 TTL과 함께 저장. client가 None이면 no-op."""
    if client is None:
        return
    ttl = ttl_seconds or settings.oauth_state_ttl_seconds
    try:
        await client.set(_state_key(provider, state), "1", ex=ttl)
    except Exception as e:
        logger.warning("OAuth state save failed (provider=%s): %s", provider, e, exc_info=True)
        raise StateStoreUnavailableError("State store unavailable") from e


async def consume_oauth_state(client: Any, provider: str, state: str) -> bool:
    """
    state가 저장돼 있으면 삭제하고 True. 없거나 만료면 False.
    GETDEL 한 번으로 조회와 삭제를 묶어 같은 state 재사용을 막는다.
    """
    if client is None:
        return True
    try:
        value = await client.getdel(_state_key(provider, state))
    except Exception as e:
        logger.warning("OAuth state check failed (provider=%s): %s", provider, e, exc_info=True)
        raise StateStoreUnavailableError("State store unavailable") from e
    return value is not None
