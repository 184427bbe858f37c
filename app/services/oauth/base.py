"""
소셜 로그인 provider 어댑터 공통부.
로그인 URL 조립, 외부 호출 래핑, provider별 에러 응답 → OAuthProviderError 변환.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from typing import Any, ClassVar, TypeVar
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, SecretStr, ValidationError

from app.models.user import AuthProvider
from app.schemas.oauth import ProviderTokenResponse, SocialProfile

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class OAuthError(Exception):
    """소셜 로그인 예외 공통. status_code는 HTTP 응답 코드로 그대로 사용."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class OAuthConfigError(OAuthError):
    """client id/secret/redirect uri 등 필수 설정 누락."""

    status_code = 500


class OAuthProviderError(OAuthError):
    """provider가 실패를 응답했거나 응답 형태가 기대와 다름. 전송 실패 포함."""

    status_code = 502


class OAuthProvider(ABC):
    """provider 어댑터 베이스. 상태 없음. 호출마다 공유 AsyncClient를 받는다."""

    name: ClassVar[AuthProvider]
    display_name: ClassVar[str]
    authorize_url: ClassVar[str]
    token_url: ClassVar[str]
    user_info_url: ClassVar[str]
    # 에러 응답 JSON에서 메시지를 꺼낼 키(앞에서부터).
    error_message_keys: ClassVar[tuple[str, ...]] = ("error_description", "error")
    # 로그인 URL에 state를 싣고 토큰 교환 때 되돌려 받는 provider.
    requires_state: ClassVar[bool] = False

    def __init__(
        self,
        client_id: str | None,
        client_secret: SecretStr | str | None,
        redirect_uri: str | None,
    ) -> None:
        self.client_id = (client_id or "").strip() or None
        if isinstance(client_secret, SecretStr):
            client_secret = client_secret.get_secret_value()
        self.client_secret = (client_secret or "").strip() or None
        self.redirect_uri = (redirect_uri or "").strip() or None

    # --- 로그인 URL ---

    @staticmethod
    def new_state() -> str:
        """CSRF 방지용 state. URL-safe 랜덤."""
        return secrets.token_urlsafe(24)

    def extra_authorize_params(self, state: str | None) -> dict[str, str]:
        return {}

    def build_login_url(self, state: str | None = None) -> str:
        """authorize 엔드포인트 + client_id·redirect_uri·response_type=code·provider별 추가 파라미터."""
        self._require_config(client_id=self.client_id, redirect_uri=self.redirect_uri)
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
        }
        params.update(self.extra_authorize_params(state))
        return f"{self.authorize_url}?{urlencode(params)}"

    # --- provider별 구현 ---

    @abstractmethod
    async def exchange_code(
        self, code: str, *, client: httpx.AsyncClient, state: str | None = None
    ) -> ProviderTokenResponse:
        """인가 코드 → 액세스 토큰."""

    @abstractmethod
    async def fetch_user_info(self, access_token: str, *, client: httpx.AsyncClient) -> BaseModel:
        """액세스 토큰으로 사용자 정보 조회."""

    @abstractmethod
    async def revoke(self, access_token: str, *, client: httpx.AsyncClient) -> None:
        """토큰 폐기 / 연결 해제."""

    @abstractmethod
    def to_social_profile(self, info: Any) -> SocialProfile:
        """fetch_user_info 결과를 계정 매칭용 SocialProfile로."""

    async def fetch_social_profile(
        self, access_token: str, *, client: httpx.AsyncClient
    ) -> SocialProfile:
        info = await self.fetch_user_info(access_token, client=client)
        return self.to_social_profile(info)

    # --- 공통 헬퍼 ---

    def _require_config(self, **values: str | None) -> None:
        missing = [key for key, value in values.items() if not value]
        if missing:
            logger.error(
                "%s login is not configured (missing: %s)",
                self.display_name,
                ", ".join(missing),
            )
            raise OAuthConfigError(f"{self.display_name} login is not configured")

    async def _send(
        self,
        method: str,
        url: str,
        *,
        client: httpx.AsyncClient,
        action: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """외부 호출. 네트워크 예외는 503, 2xx 외 응답은 provider 상태코드로 OAuthProviderError."""
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning(
                "%s %s network error: %s", self.display_name, action, e, exc_info=True
            )
            raise OAuthProviderError(
                f"{self.display_name} temporarily unavailable", status_code=503
            ) from e
        if not response.is_success:
            self._raise_for_upstream(response, action)
        return response

    def _raise_for_upstream(self, response: httpx.Response, action: str) -> None:
        message = self.extract_error_message(self._json(response)) or (
            f"{self.display_name} API request failed"
        )
        logger.warning(
            "%s %s failed: %s - %s",
            self.display_name,
            action,
            response.status_code,
            message,
        )
        raise OAuthProviderError(message, status_code=response.status_code)

    def extract_error_message(self, payload: dict[str, Any]) -> str | None:
        for key in self.error_message_keys:
            value = payload.get(key)
            # 구글 API 오류: {"error": {"code", "message", "status"}}
            if isinstance(value, dict):
                value = value.get("message")
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """JSON 본문. 파싱 불가·객체 아님이면 빈 dict."""
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _validate(
        self,
        model: type[ModelT],
        payload: dict[str, Any],
        *,
        status_code: int,
        message: str,
        action: str,
    ) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                "%s %s returned unexpected payload: %s",
                self.display_name,
                action,
                e.errors(include_url=False),
            )
            raise OAuthProviderError(message, status_code=status_code) from e
