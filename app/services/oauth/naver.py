"""
네이버 OAuth 어댑터.
토큰 엔드포인트는 GET, 실패도 200 + {"error", "error_description"}로 응답하는 경우가 있다.
사용자 정보는 resultcode '00'일 때만 성공.
"""

import logging

import httpx

from app.models.user import AuthProvider
from app.schemas.oauth import NaverTokenResponse, NaverUserInfo, SocialProfile
from app.services.oauth.base import OAuthProvider, OAuthProviderError

logger = logging.getLogger(__name__)

NAVER_AUTH_HOST = "https://nid.naver.com/oauth2.0"
NAVER_USER_INFO_URL = "https://openapi.naver.com/v1/nid/me"
NAVER_SUCCESS_RESULT_CODE = "00"


class NaverOAuthProvider(OAuthProvider):
    name = AuthProvider.NAVER
    display_name = "Naver"
    authorize_url = f"{NAVER_AUTH_HOST}/authorize"
    token_url = f"{NAVER_AUTH_HOST}/token"
    user_info_url = NAVER_USER_INFO_URL
    error_message_keys = ("error_description", "message")
    requires_state = True

    def extra_authorize_params(self, state: str | None) -> dict[str, str]:
        return {"state": state or self.new_state()}

    async def exchange_code(
        self, code: str, *, client: httpx.AsyncClient, state: str | None = None
    ) -> NaverTokenResponse:
        self._require_config(client_id=self.client_id, client_secret=self.client_secret)
        if not state:
            logger.warning("Naver token exchange without state")
            raise OAuthProviderError("State parameter is missing", status_code=400)
        response = await self._send(
            "GET",
            self.token_url,
            client=client,
            action="token exchange",
            params={
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "state": state,
            },
        )
        payload = self._json(response)
        if payload.get("error"):
            message = self.extract_error_message(payload) or "Naver token issuance failed"
            logger.warning("Naver token exchange failed: %s - %s", payload.get("error"), message)
            raise OAuthProviderError(message, status_code=401)
        return self._validate(
            NaverTokenResponse,
            payload,
            status_code=401,
            message="Naver token issuance failed",
            action="token exchange",
        )

    async def fetch_user_info(
        self, access_token: str, *, client: httpx.AsyncClient
    ) -> NaverUserInfo:
        response = await self._send(
            "GET",
            self.user_info_url,
            client=client,
            action="user info",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        payload = self._json(response)
        if payload.get("resultcode") != NAVER_SUCCESS_RESULT_CODE:
            message = payload.get("message") or "Naver user info request failed"
            logger.warning(
                "Naver user info failed: %s - %s", payload.get("resultcode"), message
            )
            raise OAuthProviderError(message, status_code=401)
        return self._validate(
            NaverUserInfo,
            payload,
            status_code=400,
            message="Naver user info is not available",
            action="user info",
        )

    async def revoke(self, access_token: str, *, client: httpx.AsyncClient) -> None:
        """토큰 삭제(grant_type=delete)."""
        self._require_config(client_id=self.client_id, client_secret=self.client_secret)
        try:
            response = await self._send(
                "GET",
                self.token_url,
                client=client,
                action="token delete",
                params={
                    "grant_type": "delete",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "access_token": access_token,
                    "service_provider": "NAVER",
                },
            )
        except OAuthProviderError as e:
            raise OAuthProviderError("Naver logout failed", status_code=400) from e
        payload = self._json(response)
        if payload.get("error"):
            logger.warning(
                "Naver token delete failed: %s - %s",
                payload.get("error"),
                payload.get("error_description"),
            )
            raise OAuthProviderError("Naver logout failed", status_code=400)

    def to_social_profile(self, info: NaverUserInfo) -> SocialProfile:
        detail = info.response
        return SocialProfile(
            provider=self.name,
            provider_id=detail.id,
            email=detail.email,
            # 네이버는 인증된 이메일만 제공
            email_verified=bool(detail.email),
            nickname=detail.nickname or detail.name,
        )
