"""카카오 OAuth 어댑터. client_secret은 콘솔에서 켠 경우에만 전송."""

import logging

import httpx

from app.models.user import AuthProvider
from app.schemas.oauth import KakaoTokenResponse, KakaoUserInfo, SocialProfile
from app.services.oauth.base import OAuthProvider, OAuthProviderError

logger = logging.getLogger(__name__)

KAKAO_AUTH_HOST = "https://kauth.kakao.com"
KAKAO_API_HOST = "https://kapi.kakao.com"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=utf-8"


class KakaoOAuthProvider(OAuthProvider):
    name = AuthProvider.KAKAO
    display_name = "Kakao"
    authorize_url = f"{KAKAO_AUTH_HOST}/oauth/authorize"
    token_url = f"{KAKAO_AUTH_HOST}/oauth/token"
    user_info_url = f"{KAKAO_API_HOST}/v2/user/me"
    unlink_url = f"{KAKAO_API_HOST}/v1/user/unlink"

    def extra_authorize_params(self, state: str | None) -> dict[str, str]:
        return {"state": state} if state else {}

    async def exchange_code(
        self, code: str, *, client: httpx.AsyncClient, state: str | None = None
    ) -> KakaoTokenResponse:
        self._require_config(client_id=self.client_id, redirect_uri=self.redirect_uri)
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "code": code,
        }
        if self.client_secret:
            data["client_secret"] = self.client_secret
        response = await self._send(
            "POST",
            self.token_url,
            client=client,
            action="token exchange",
            data=data,
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        return self._validate(
            KakaoTokenResponse,
            self._json(response),
            status_code=401,
            message="Kakao token issuance failed",
            action="token exchange",
        )

    async def fetch_user_info(
        self, access_token: str, *, client: httpx.AsyncClient
    ) -> KakaoUserInfo:
        response = await self._send(
            "GET",
            self.user_info_url,
            client=client,
            action="user info",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": FORM_CONTENT_TYPE,
            },
        )
        return self._validate(
            KakaoUserInfo,
            self._json(response),
            status_code=400,
            message="Kakao user info is not available",
            action="user info",
        )

    async def revoke(self, access_token: str, *, client: httpx.AsyncClient) -> None:
        """연결 해제(회원 탈퇴 시). 이후 같은 계정은 다시 동의를 거친다."""
        try:
            await self._send(
                "POST",
                self.unlink_url,
                client=client,
                action="unlink",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except OAuthProviderError as e:
            raise OAuthProviderError("Kakao unlink failed", status_code=400) from e
        logger.info("Kakao unlink succeeded")

    def to_social_profile(self, info: KakaoUserInfo) -> SocialProfile:
        account = info.kakao_account
        profile = account.profile if account else None
        return SocialProfile(
            provider=self.name,
            provider_id=str(info.id),
            email=account.email if account else None,
            email_verified=bool(account and account.is_email_verified),
            nickname=profile.nickname if profile else None,
        )
