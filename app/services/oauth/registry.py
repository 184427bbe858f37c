"""provider 태그 → 설정이 주입된 어댑터."""

from app.core.config import Settings, settings as default_settings
from app.models.user import AuthProvider
from app.services.oauth.base import OAuthProvider
from app.services.oauth.google import GoogleOAuthProvider
from app.services.oauth.kakao import KakaoOAuthProvider
from app.services.oauth.naver import NaverOAuthProvider

SOCIAL_PROVIDERS: tuple[AuthProvider, ...] = (
    AuthProvider.GOOGLE,
    AuthProvider.KAKAO,
    AuthProvider.NAVER,
)


def get_provider(name: str | AuthProvider, settings: Settings | None = None) -> OAuthProvider:
    """
    설정에서 client id/secret/redirect uri를 읽어 어댑터 생성.
    설정은 호출 시점 값을 쓰므로 누락 검사는 각 연산에서 OAuthConfigError로 드러난다.
    """
    cfg = settings or default_settings
    key = name.value if isinstance(name, AuthProvider) else str(name).strip().lower()
    if key == AuthProvider.GOOGLE.value:
        return GoogleOAuthProvider(
            cfg.google_client_id, cfg.google_client_secret, cfg.google_redirect_uri
        )
    if key == AuthProvider.KAKAO.value:
        return KakaoOAuthProvider(
            cfg.kakao_client_id, cfg.kakao_client_secret, cfg.kakao_redirect_uri
        )
    if key == AuthProvider.NAVER.value:
        return NaverOAuthProvider(
            cfg.naver_client_id, cfg.naver_client_secret, cfg.naver_redirect_uri
        )
    raise ValueError(f"Unsupported provider: {name}")
