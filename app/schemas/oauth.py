"""소셜 로그인 provider 응답 스키마. model_validate로 응답 형태 검증(cast 금지)."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import AuthProvider


class _ProviderPayload(BaseModel):
    """provider 응답은 필드가 수시로 늘어나므로 모르는 필드는 무시."""

    model_config = ConfigDict(extra="ignore")


class ProviderTokenResponse(_ProviderPayload):
    """토큰 교환 응답 공통 필드. access_token은 비어 있으면 안 됨."""

    access_token: str = Field(..., min_length=1)
    token_type: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None


class GoogleTokenResponse(ProviderTokenResponse):
    scope: str | None = None
    id_token: str | None = None


class KakaoTokenResponse(ProviderTokenResponse):
    scope: str | None = None
    refresh_token_expires_in: int | None = None


class NaverTokenResponse(ProviderTokenResponse):
    pass


class GoogleUserInfo(_ProviderPayload):
    """GET /oauth2/v2/userinfo. email 필수."""

    id: str | None = None
    email: str = Field(..., min_length=1)
    verified_email: bool | None = None
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None
    locale: str | None = None


class KakaoProfile(_ProviderPayload):
    nickname: str | None = None
    thumbnail_image_url: str | None = None
    profile_image_url: str | None = None


class KakaoAccount(_ProviderPayload):
    profile_needs_agreement: bool | None = None
    profile: KakaoProfile | None = None
    email_needs_agreement: bool | None = None
    is_email_valid: bool | None = None
    is_email_verified: bool | None = None
    email: str | None = None


class KakaoUserInfo(_ProviderPayload):
    """GET /v2/user/me. 숫자 id 필수."""

    id: int = Field(..., gt=0)
    connected_at: str | None = None
    kakao_account: KakaoAccount | None = None


class NaverUserDetail(_ProviderPayload):
    id: str = Field(..., min_length=1)
    email: str | None = None
    name: str | None = None
    nickname: str | None = None
    profile_image: str | None = None
    age: str | None = None
    gender: str | None = None
    birthday: str | None = None
    birthyear: str | None = None
    mobile: str | None = None


class NaverUserInfo(_ProviderPayload):
    """GET /v1/nid/me. resultcode '00'이 성공. 본문은 response 아래."""

    resultcode: str
    message: str | None = None
    response: NaverUserDetail


class SocialProfile(BaseModel):
    """provider별 사용자 정보를 계정 매칭용으로 정규화한 결과."""

    provider: AuthProvider
    provider_id: str
    email: str | None = None
    email_verified: bool = False
    nickname: str | None = None
