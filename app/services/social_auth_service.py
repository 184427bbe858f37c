"""
Social Auth Service. provider 어댑터 → 계정 매칭/생성 → 앱 JWT 발급.
1. (state 사용 provider) 쿠키와 본문 state 일치 확인, 저장해 둔 state 1회 소비로 CSRF 검증
2. code → provider 토큰 교환
3. provider 사용자 정보 조회 후 SocialProfile 정규화
4. (provider, provider_id)로 User 조회, 없으면 프로필과 함께 생성
5. JWT 발급
"""

import logging
import secrets
from typing import Any

import httpx
from sqlalchemy.exc import IntegrityError

from app.core.database import transaction
from app.core.redis import consume_oauth_state, save_oauth_state
from app.models.user import User
from app.models.user_profile import UserProfile
from app.repositories.user_repository import add_user, get_by_provider_id
from app.schemas.auth import LoginUrlResponse, SocialLoginPayload, TokenResponse
from app.schemas.oauth import SocialProfile
from app.services.auth_service import AuthError, issue_token
from app.services.oauth import get_provider

logger = logging.getLogger(__name__)

NICKNAME_MAX_LENGTH = 50


class SocialAccountError(Exception):
    """provider 계정 정보로 앱 계정을 만들 수 없음(이메일 미동의 등). Router에서 400."""

    pass


async def build_login_url(provider_name: str, *, redis_client: Any = None) -> LoginUrlResponse:
    """provider 로그인 URL. state를 쓰는 provider면 state를 발급해 Redis에 보관."""
    provider = get_provider(provider_name)
    state = provider.new_state() if provider.requires_state else None
    url = provider.build_login_url(state=state)
    if state is not None:
        await save_oauth_state(redis_client, provider.name.value, state)
    return LoginUrlResponse(url=url, state=state)


def _default_nickname(profile: SocialProfile) -> str:
    nickname = (profile.nickname or "").strip()
    if not nickname and profile.email:
        nickname = profile.email.split("@", 1)[0]
    return (nickname or f"{profile.provider.value}-user")[:NICKNAME_MAX_LENGTH]


async def _get_or_create_user(profile: SocialProfile, payload: SocialLoginPayload) -> User:
    async with transaction() as session:
        user = await get_by_provider_id(session, profile.provider, profile.provider_id)
        if user is not None:
            return user
        if not profile.email:
            raise SocialAccountError("Email permission is required to sign up")
        if not (payload.service_agreed and payload.privacy_agreed):
            raise SocialAccountError("Service terms and privacy policy must be agreed")
        user = User(
            email=profile.email,
            password_hash=None,
            provider=profile.provider,
            provider_id=profile.provider_id,
            service_agreed=payload.service_agreed,
            privacy_agreed=payload.privacy_agreed,
            marketing_agreed=payload.marketing_agreed,
            is_email_verified=profile.email_verified,
            profile=UserProfile(nickname=_default_nickname(profile), biography=""),
        )
        await add_user(session, user)
        logger.info(
            "Social user signed up: id=%s provider=%s", user.id, profile.provider.value
        )
        return user


async def upsert_social_user(profile: SocialProfile, payload: SocialLoginPayload) -> User:
    """
    (provider, provider_id)로 조회, 없으면 생성.
    같은 계정의 첫 로그인이 동시에 들어와 유니크 제약에 걸리면 먼저 커밋된 행을 다시 읽는다.
    """
    try:
        return await _get_or_create_user(profile, payload)
    except IntegrityError as e:
        logger.info(
            "Concurrent social sign-up for provider=%s, re-reading", profile.provider.value
        )
        async with transaction() as session:
            user = await get_by_provider_id(session, profile.provider, profile.provider_id)
        if user is None:
            raise SocialAccountError("Account already exists with this email") from e
        return user


async def social_login(
    provider_name: str,
    payload: SocialLoginPayload,
    *,
    http_client: httpx.AsyncClient,
    redis_client: Any = None,
    state_cookie: str | None = None,
) -> TokenResponse:
    """
    provider 인가 코드로 로그인. 실패는 OAuthError/AuthError/SocialAccountError로 전파.
    state_cookie는 login-url 응답이 심은 쿠키 값. 본문 state와 같아야 같은 브라우저의 요청.
    """
    provider = get_provider(provider_name)
    if provider.requires_state and payload.state:
        if not state_cookie or not secrets.compare_digest(
            state_cookie.encode(), payload.state.encode()
        ):
            logger.warning("OAuth state not bound to caller (provider=%s)", provider.name.value)
            raise AuthError("State does not match this session")
        valid = await consume_oauth_state(redis_client, provider.name.value, payload.state)
        if not valid:
            logger.warning("Unknown or expired OAuth state (provider=%s)", provider.name.value)
            raise AuthError("Invalid or expired state")

    token = await provider.exchange_code(payload.code, client=http_client, state=payload.state)
    profile = await provider.fetch_social_profile(token.access_token, client=http_client)
    user = await upsert_social_user(profile, payload)
    return issue_token(user.id)


async def revoke_provider_token(
    provider_name: str, access_token: str, *, http_client: httpx.AsyncClient
) -> None:
    """provider 액세스 토큰 폐기(구글/네이버) 또는 연결 해제(카카오)."""
    provider = get_provider(provider_name)
    await provider.revoke(access_token, client=http_client)
