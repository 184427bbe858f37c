"""소셜 로그인 API. 구글·카카오·네이버 OAuth + 앱 JWT."""

from typing import Any

import httpx
from fastapi import APIRouter, Cookie, Depends, HTTPException, Response

from app.core.config import settings
from app.core.deps import get_httpx_client, get_redis_client
from app.core.redis import StateStoreUnavailableError
from app.models.user import AuthProvider
from app.schemas.auth import LoginUrlResponse, RevokePayload, SocialLoginPayload, TokenResponse
from app.services.auth_service import AuthError
from app.services.oauth import SOCIAL_PROVIDERS
from app.services.social_auth_service import (
    SocialAccountError,
    build_login_url,
    revoke_provider_token,
    social_login,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# login-url을 요청한 브라우저에만 state를 묶어 둔다.
OAUTH_STATE_COOKIE = "oauth_state"


def get_social_provider(provider: str) -> str:
    """경로의 provider 태그 검증. 지원 외(local 포함)는 404."""
    key = provider.strip().lower()
    if key not in {p.value for p in SOCIAL_PROVIDERS}:
        raise HTTPException(status_code=404, detail=f"Unsupported provider: {provider}")
    return AuthProvider(key).value


@router.get("/{provider}/login-url", response_model=LoginUrlResponse)
async def get_login_url(
    response: Response,
    provider_name: str = Depends(get_social_provider),
    redis_client: Any = Depends(get_redis_client),
) -> LoginUrlResponse:
    """provider 로그인 URL. 네이버는 state 포함(콜백에서 그대로 전달) + HttpOnly 쿠키."""
    try:
        result = await build_login_url(provider_name, redis_client=redis_client)
    except StateStoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    if result.state:
        response.set_cookie(
            OAUTH_STATE_COOKIE,
            result.state,
            max_age=settings.oauth_state_ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=settings.environment.strip().lower() == "production",
        )
    return result


@router.post("/{provider}", response_model=TokenResponse)
async def post_social_login(
    payload: SocialLoginPayload,
    response: Response,
    provider_name: str = Depends(get_social_provider),
    http_client: httpx.AsyncClient = Depends(get_httpx_client),
    redis_client: Any = Depends(get_redis_client),
    state_cookie: str | None = Cookie(None, alias=OAUTH_STATE_COOKIE),
) -> TokenResponse:
    """
    provider Authorization Code로 로그인.
    처음 로그인한 계정은 가입 처리(프로필 포함) 후 Access JWT 반환.
    provider 오류(OAuthError)는 main의 핸들러가 provider 상태코드로 응답.
    """
    try:
        token = await social_login(
            provider_name,
            payload,
            http_client=http_client,
            redis_client=redis_client,
            state_cookie=state_cookie,
        )
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except SocialAccountError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StateStoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    if state_cookie:
        response.delete_cookie(OAUTH_STATE_COOKIE)
    return token


@router.post("/{provider}/revoke", status_code=204)
async def post_revoke(
    payload: RevokePayload,
    provider_name: str = Depends(get_social_provider),
    http_client: httpx.AsyncClient = Depends(get_httpx_client),
) -> Response:
    """provider 토큰 폐기 / 연결 해제. 204 No Content."""
    await revoke_provider_token(provider_name, payload.access_token, http_client=http_client)
    return Response(status_code=204)
