"""Auth Service 단위 테스트. JWT·비밀번호·이메일 가입/로그인."""

import jwt
import pytest
from pydantic import SecretStr, ValidationError

from app.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.schemas.auth import SignInPayload
from app.schemas.user import SignUpPayload
from app.services.auth_service import AuthError, UserAlreadyExistsError, sign_in, sign_up


def _sign_up_payload(**overrides) -> SignUpPayload:
    fields = {
        "email": "kim@example.com",
        "password": "passw0rd!",
        "service_agreed": True,
        "privacy_agreed": True,
    }
    fields.update(overrides)
    return SignUpPayload(**fields)


def test_create_access_token_round_trip() -> None:
    """create_access_token: sub·type이 검증 결과에 그대로."""
    token = create_access_token(user_id=7)
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["type"] == "access"
    assert payload["jti"]


def test_create_access_token_raises_without_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    """JWT_SECRET 비어 있으면 TokenError."""
    monkeypatch.setattr(
        "app.core.security.settings.jwt_secret",
        SecretStr(""),
    )
    with pytest.raises(TokenError):
        create_access_token(user_id=1)


def test_decode_rejects_foreign_signature() -> None:
    """다른 시크릿으로 서명한 토큰 거부."""
    forged = jwt.encode({"sub": "1", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(TokenError):
        decode_access_token(forged)


def test_password_hash_verify() -> None:
    hashed = hash_password("passw0rd!")
    assert hashed != "passw0rd!"
    assert verify_password("passw0rd!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("passw0rd!", None)


@pytest.mark.parametrize("password", ["short1!", "onlyletters!", "12345678!", "letters123", "~passw0rd!"])
def test_sign_up_payload_password_rules(password: str) -> None:
    """8자 이상 + 영문·숫자·특수문자. 허용 범위 밖 문자로 시작해도 거부."""
    with pytest.raises(ValidationError):
        _sign_up_payload(password=password)


def test_sign_up_payload_requires_agreements() -> None:
    with pytest.raises(ValidationError):
        _sign_up_payload(privacy_agreed=False)


@pytest.mark.asyncio
async def test_sign_up_then_sign_in(db_engine) -> None:
    user = await sign_up(_sign_up_payload(marketing_agreed=True))
    assert user.id is not None
    assert user.password_hash != "passw0rd!"
    assert user.marketing_agreed is True

    token = await sign_in(SignInPayload(email="kim@example.com", password="passw0rd!"))
    assert decode_access_token(token.access_token)["sub"] == str(user.id)
    assert token.token_type == "bearer"


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(db_engine) -> None:
    await sign_up(_sign_up_payload())
    with pytest.raises(UserAlreadyExistsError):
        await sign_up(_sign_up_payload())


@pytest.mark.asyncio
async def test_sign_in_wrong_password(db_engine) -> None:
    await sign_up(_sign_up_payload())
    with pytest.raises(AuthError):
        await sign_in(SignInPayload(email="kim@example.com", password="wrong-pass1!"))


@pytest.mark.asyncio
async def test_sign_in_unknown_email(db_engine) -> None:
    with pytest.raises(AuthError):
        await sign_in(SignInPayload(email="nobody@example.com", password="passw0rd!"))
