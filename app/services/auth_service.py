"""Auth Service. 이메일 회원가입, 이메일 로그인(JWT 발급)."""

import logging

from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.database import transaction
from app.core.security import TokenError, create_access_token, hash_password, verify_password
from app.models.user import AuthProvider, User
from app.repositories.user_repository import add_user, get_local_by_email
from app.schemas.auth import SignInPayload, TokenResponse
from app.schemas.user import SignUpPayload

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """인증 실패. Router에서 401로 변환."""

    pass


class UserAlreadyExistsError(Exception):
    """같은 이메일의 로컬 계정이 이미 있음. Router에서 409로 변환."""

    pass


def issue_token(user_id: int) -> TokenResponse:
    """앱 Access JWT 응답 생성. JWT_SECRET 누락은 AuthError."""
    try:
        access_token = create_access_token(user_id)
    except TokenError as e:
        raise AuthError(str(e)) from e
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.jwt_access_expire_seconds,
    )


async def sign_up(payload: SignUpPayload) -> User:
    """
    로컬 계정 생성. 비밀번호는 해시만 저장.
    동시 가입으로 유니크 제약에 걸리면 UserAlreadyExistsError.
    """
    async with transaction() as session:
        if await get_local_by_email(session, payload.email) is not None:
            raise UserAlreadyExistsError("Email already registered")
        user = User(
            email=payload.email,
            password_hash=hash_password(payload.password),
            provider=AuthProvider.LOCAL,
            provider_id=None,
            service_agreed=payload.service_agreed,
            privacy_agreed=payload.privacy_agreed,
            marketing_agreed=payload.marketing_agreed,
            is_email_verified=False,
        )
        try:
            await add_user(session, user)
        except IntegrityError as e:
            raise UserAlreadyExistsError("Email already registered") from e
        logger.info("Local user signed up: id=%s", user.id)
        return user


async def sign_in(payload: SignInPayload) -> TokenResponse:
    """이메일·비밀번호 확인 후 JWT 발급. 계정 유무와 비밀번호 불일치를 구분하지 않음."""
    async with transaction() as session:
        user = await get_local_by_email(session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Sign-in rejected for %s", payload.email)
            raise AuthError("Invalid email or password")
        user_id = user.id
    return issue_token(user_id)
