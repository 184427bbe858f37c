"""비밀번호 해싱(passlib)과 앱 Access JWT 발급/검증(PyJWT)."""

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

# PBKDF2: C 확장 의존 없이 어디서나 동일 해시.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

JWT_ALGORITHM = "HS256"


class TokenError(Exception):
    """JWT 발급/검증 실패."""

    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """해시가 없는 계정(소셜 전용)은 항상 False."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int) -> str:
    """
    Access JWT 생성. sub=user_id, type=access, jti 포함.
    JWT_SECRET이 비어 있으면 TokenError.
    """
    secret = settings.jwt_secret.get_secret_value()
    if not secret:
        raise TokenError("JWT_SECRET not configured")
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "type": "access",
        "jti": str(uuid.uuid4()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": now + timedelta(seconds=settings.jwt_access_expire_seconds),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(encoded: str) -> dict[str, Any]:
    """Access JWT 검증. 서명·iss·aud·exp와 type=access 확인."""
    try:
        payload = jwt.decode(
            encoded,
            settings.jwt_secret.get_secret_value(),
            algorithms=[JWT_ALGORITHM],
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            options={"require": ["exp", "iat", "sub", "type"]},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid access token: %s", e)
        raise TokenError("Invalid or expired token") from e
    if payload.get("type") != "access":
        raise TokenError("Invalid token type")
    return payload
