"""provider 레지스트리: 설정 주입과 지원 외 provider."""

import pytest
from pydantic import SecretStr

from app.core.config import Settings
from app.services.oauth import (
    GoogleOAuthProvider,
    KakaoOAuthProvider,
    NaverOAuthProvider,
    OAuthConfigError,
    get_provider,
)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, jwt_secret=SecretStr("s"), **overrides)


def test_get_provider_reads_settings() -> None:
    cfg = _settings(
        naver_client_id="n-id",
        naver_client_secret=SecretStr("n-secret"),
        naver_redirect_uri="http://cb",
    )
    provider = get_provider("NAVER", cfg)
    assert isinstance(provider, NaverOAuthProvider)
    assert provider.client_id == "n-id"
    assert provider.client_secret == "n-secret"
    assert provider.redirect_uri == "http://cb"


def test_get_provider_types() -> None:
    cfg = _settings()
    assert isinstance(get_provider("google", cfg), GoogleOAuthProvider)
    assert isinstance(get_provider("kakao", cfg), KakaoOAuthProvider)


def test_get_provider_unknown() -> None:
    with pytest.raises(ValueError):
        get_provider("facebook", _settings())


def test_unconfigured_provider_fails_with_config_error() -> None:
    """설정 없이 만든 어댑터는 URL 생성 시 OAuthConfigError(다른 예외 아님)."""
    for name in ("google", "kakao", "naver"):
        with pytest.raises(OAuthConfigError):
            get_provider(name, _settings()).build_login_url()
