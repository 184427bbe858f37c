"""Auth 관련 Pydantic 스키마. 요청 본문은 extra='forbid'로 페이로드 오염 방지."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignInPayload(BaseModel):
    """이메일 로그인 요청."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SocialLoginPayload(BaseModel):
    """소셜 로그인. 인가 코드(+네이버 state)와 신규 가입 시 저장할 약관 동의."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="provider OAuth Authorization Code",
    )
    state: str | None = Field(
        None,
        max_length=256,
        description="로그인 URL 발급 시 받은 state (네이버 필수)",
    )
    service_agreed: bool = Field(..., description="서비스 약관 동의. 신규 가입 시 true 필수")
    privacy_agreed: bool = Field(..., description="개인정보 처리방침 동의. 신규 가입 시 true 필수")
    marketing_agreed: bool = False


class RevokePayload(BaseModel):
    """provider 액세스 토큰 폐기/연결 해제 요청."""

    model_config = ConfigDict(extra="forbid")

    access_token: str = Field(..., min_length=1, max_length=4096)


class LoginUrlResponse(BaseModel):
    """provider 로그인 URL. state는 콜백에서 그대로 돌려보내야 함."""

    url: str
    state: str | None = None


class TokenResponse(BaseModel):
    """앱 JWT 응답."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token 만료 시간(초)")
