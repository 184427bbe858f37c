"""네이버 어댑터 단위 테스트. 200 + error 페이로드, resultcode 검증 포함."""

from urllib.parse import parse_qs, urlparse

import pytest

from app.services.oauth import NaverOAuthProvider, OAuthConfigError, OAuthProviderError

TOKEN_URL = "https://nid.naver.com/oauth2.0/token"
USER_ME_URL = "https://openapi.naver.com/v1/nid/me"


@pytest.fixture
def naver() -> NaverOAuthProvider:
    return NaverOAuthProvider("n-client", "n-secret", "http://localhost:3000/callback/naver")


def test_build_login_url_generates_state(naver: NaverOAuthProvider) -> None:
    """state 미지정 시 생성해서 포함. 호출마다 다름."""
    first = parse_qs(urlparse(naver.build_login_url()).query)
    second = parse_qs(urlparse(naver.build_login_url()).query)
    assert first["response_type"] == ["code"]
    assert first["client_id"] == ["n-client"]
    assert first["redirect_uri"] == ["http://localhost:3000/callback/naver"]
    assert first["state"][0]
    assert first["state"] != second["state"]


def test_build_login_url_uses_given_state(naver: NaverOAuthProvider) -> None:
    url = naver.build_login_url(state="fixed-state")
    assert parse_qs(urlparse(url).query)["state"] == ["fixed-state"]


def test_build_login_url_missing_config() -> None:
    with pytest.raises(OAuthConfigError):
        NaverOAuthProvider(None, "n-secret", "http://cb").build_login_url()


@pytest.mark.asyncio
async def test_exchange_code_missing_secret_is_config_error(http_client) -> None:
    with pytest.raises(OAuthConfigError):
        await NaverOAuthProvider("n-client", None, "http://cb").exchange_code(
            "c", client=http_client, state="s"
        )


@pytest.mark.asyncio
async def test_exchange_code_requires_state(naver, upstream, http_client) -> None:
    """state 없으면 호출 전 400."""
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.exchange_code("c", client=http_client, state=None)
    assert exc_info.value.status_code == 400
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_exchange_code_is_get_with_query(naver, upstream, http_client) -> None:
    upstream.add(
        "GET",
        TOKEN_URL,
        json={"access_token": "naver-at", "refresh_token": "r", "token_type": "bearer", "expires_in": "3600"},
    )
    token = await naver.exchange_code("c", client=http_client, state="s1")
    params = upstream.last_request.url.params
    assert token.access_token == "naver-at"
    assert token.expires_in == 3600
    assert params["grant_type"] == "authorization_code"
    assert params["client_secret"] == "n-secret"
    assert params["state"] == "s1"


@pytest.mark.asyncio
async def test_exchange_code_error_payload_with_200(naver, upstream, http_client) -> None:
    """네이버는 실패도 200으로 응답 → error_description을 메시지로 401."""
    upstream.add(
        "GET",
        TOKEN_URL,
        json={"error": "invalid_request", "error_description": "no valid data in session"},
    )
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.exchange_code("c", client=http_client, state="s1")
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "no valid data in session"


@pytest.mark.asyncio
async def test_exchange_code_without_access_token_is_rejected(naver, upstream, http_client) -> None:
    """200인데 access_token도 error도 없음 → 401."""
    upstream.add("GET", TOKEN_URL, json={"token_type": "bearer"})
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.exchange_code("c", client=http_client, state="s1")
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Naver token issuance failed"


@pytest.mark.asyncio
async def test_fetch_user_info_rejects_non_success_resultcode(naver, upstream, http_client) -> None:
    upstream.add("GET", USER_ME_URL, json={"resultcode": "024", "message": "Authentication failed"})
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.fetch_user_info("naver-at", client=http_client)
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Authentication failed"


@pytest.mark.asyncio
async def test_fetch_user_info_upstream_status_and_message(naver, upstream, http_client) -> None:
    """HTTP 401 응답은 message 키에서 메시지 추출."""
    upstream.add(
        "GET",
        USER_ME_URL,
        status_code=401,
        json={"resultcode": "024", "message": "Authentication failed (인증 실패하였습니다.)"},
    )
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.fetch_user_info("naver-at", client=http_client)
    assert exc_info.value.status_code == 401
    assert exc_info.value.message.startswith("Authentication failed")


@pytest.mark.asyncio
async def test_fetch_user_info_requires_id(naver, upstream, http_client) -> None:
    upstream.add(
        "GET",
        USER_ME_URL,
        json={"resultcode": "00", "message": "success", "response": {"email": "a@naver.com"}},
    )
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.fetch_user_info("naver-at", client=http_client)
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_fetch_social_profile(naver, upstream, http_client) -> None:
    upstream.add(
        "GET",
        USER_ME_URL,
        json={
            "resultcode": "00",
            "message": "success",
            "response": {"id": "naver-uid", "email": "kim@naver.com", "nickname": "kim"},
        },
    )
    profile = await naver.fetch_social_profile("naver-at", client=http_client)
    assert profile.provider_id == "naver-uid"
    assert profile.email == "kim@naver.com"
    assert profile.nickname == "kim"


@pytest.mark.asyncio
async def test_revoke_uses_delete_grant(naver, upstream, http_client) -> None:
    upstream.add("GET", TOKEN_URL, json={"access_token": "naver-at", "result": "success"})
    await naver.revoke("naver-at", client=http_client)
    params = upstream.last_request.url.params
    assert params["grant_type"] == "delete"
    assert params["service_provider"] == "NAVER"
    assert params["access_token"] == "naver-at"


@pytest.mark.asyncio
async def test_revoke_error_payload(naver, upstream, http_client) -> None:
    upstream.add("GET", TOKEN_URL, json={"error": "invalid_request", "error_description": "bad token"})
    with pytest.raises(OAuthProviderError) as exc_info:
        await naver.revoke("naver-at", client=http_client)
    assert exc_info.value.status_code == 400
