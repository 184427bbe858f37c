# Social login provider adapters
from app.services.oauth.base import (
    OAuthConfigError,
    OAuthError,
    OAuthProvider,
    OAuthProviderError,
)
from app.services.oauth.google import GoogleOAuthProvider
from app.services.oauth.kakao import KakaoOAuthProvider
from app.services.oauth.naver import NaverOAuthProvider
from app.services.oauth.registry import SOCIAL_PROVIDERS, get_provider

__all__ = [
    "GoogleOAuthProvider",
    "KakaoOAuthProvider",
    "NaverOAuthProvider",
    "OAuthConfigError",
    "OAuthError",
    "OAuthProvider",
    "OAuthProviderError",
    "SOCIAL_PROVIDERS",
    "get_provider",
]
