"""Pytest fixtures. 외부 OAuth 호출은 httpx.MockTransport, DB는 in-memory SQLite(aiosqlite)."""

import os
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# 로컬 .env보다 우선. 앱 임포트 전에 설정해야 Settings가 읽는다.
os.environ["DATABASE_URL"] = ""
os.environ["REDIS_URL"] = ""
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-pytest")


class FakeUpstream:
    """provider API 대역. (method, scheme://host/path) → (status, json). 받은 요청은 requests에 기록."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.raise_error: Exception | None = None

    def add(self, method: str, url: str, status_code: int = 200, json: Any = None) -> None:
        self.routes[(method.upper(), url)] = (status_code, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        if key not in self.routes:
            return httpx.Response(404, json={"error": "not_found"})
        status_code, body = self.routes[key]
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream: FakeUpstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as client:
        yield client


@pytest_asyncio.fixture
async def db_engine():
    """테이블을 만든 in-memory SQLite 엔진을 앱 DB로 교체."""
    from app.core.database import override_db_for_testing
    from app.models import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    override_db_for_testing(engine)
    yield engine
    override_db_for_testing(None, None)
    await engine.dispose()


@pytest_asyncio.fixture
async def api_client(db_engine, http_client: httpx.AsyncClient):
    """ASGI 직접 호출 클라이언트. 공유 httpx 클라이언트는 MockTransport 버전으로 교체."""
    from app.core.deps import get_httpx_client
    from app.main import app

    app.dependency_overrides[get_httpx_client] = lambda: http_client
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    """FastAPI TestClient. DB 없이 /health 등 테스트용."""
    from app.main import app
    return TestClient(app)
