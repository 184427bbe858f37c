"""구글 OAuth 어댑터. offline access + 매번 동의 화면(refresh_token 수령)."""

import httpx

from app.models.user import AuthProvider
from app.schemas.oauth import GoogleTokenResponse, GoogleUserInfo, SocialProfile
from app.services.oauth.base import OAuthProvider, OAuthProviderError

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USER_INFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"


class GoogleOAuthProvider(OAuthProvider):
    name = AuthProvider.GOOGLE
    display_name = "Google"
    authorize_url = GOOGLE_AUTH_URL
    token_url = GOOGLE_TOKEN_URL
    user_info_url = GOOGLE_USER_INFO_URL

    def extra_authorize_params(self, state: str | None) -> dict[str, str]:
        params = {
            "scope": "email profile",
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return params

    async def exchange_code(
        self, code: str, *, client: httpx.AsyncClient, state: str | None = None
    ) -> GoogleTokenResponse:
        self._require_config(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
        )
        response = await self._send(
            "POST",
            self.token_url,
            client=client,
            action="token exchange",
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        return self._validate(
            GoogleTokenResponse,
            self._json(response),
            status_code=401,
            message="Google token issuance failed",
            action="token exchange",
        )

    async def fetch_user_info(
        self, access_token: str, *, client: httpx.AsyncClient
    ) -> GoogleUserInfo:
        response = await self._send(
            "GET",
            self.user_info_url,
            client=client,
            action="user info",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return self._validate(
            GoogleUserInfo,
            self._json(response),
            status_code=400,
            message="Google user email is not available",
            action="user info",
        )

    async def revoke(self, access_token: str, *, client: httpx.AsyncClient) -> None:
        try:
            await self._send(
                "POST",
                GOOGLE_REVOKE_URL,
                client=client,
                action="token revoke",
                params={"token": access_token},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except OAuthProviderError as e:
            raise OAuthProviderError("Google logout failed", status_code=400) from e

    def to_social_profile(self, info: GoogleUserInfo) -> SocialProfile:
        # v2 userinfo의 id가 없으면 email을 식별자로.
        return SocialProfile(
            provider=self.name,
            provider_id=info.id or info.email,
            email=info.email,
            email_verified=bool(info.verified_email),
            nickname=info.name or info.given_name,
        )
