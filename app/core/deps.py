"""FastAPI 의존성. HTTP 클라이언트·Redis·현재 사용자 등 앱 생명주기 객체 주입."""

from typing import Any

import httpx
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import TokenError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_httpx_client(request: Request) -> httpx.AsyncClient:
    """
    앱 lifespan에서 생성한 싱글톤 AsyncClient 반환.
    매 요청마다 새 클라이언트를 만들지 않아 소켓 고갈(TIME_WAIT) 방지.
    """
    return request.app.state.httpx_client


def get_redis_client(request: Request) -> Any:
    """앱 lifespan에서 생성한 Redis 비동기 클라이언트. 미설정 시 None."""
    return getattr(request.app.state, "redis_client", None)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """Authorization Bearer의 Access JWT 검증 후 user_id 반환."""
    if not credentials:
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization")
    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None
    return int(payload["sub"])
