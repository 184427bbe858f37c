"""
계정 저장소(users, user_profiles) 연결. SQLAlchemy 2.0 async.
운영은 postgresql+asyncpg, 테스트는 sqlite+aiosqlite 엔진을 override_db_for_testing으로 주입.
서비스 코드는 transaction()만 사용한다.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings

logger = logging.getLogger(__name__)


class _DbHolder:
    engine: AsyncEngine | None = None
    async_session_maker: async_sessionmaker[AsyncSession] | None = None


_db_holder = _DbHolder()

# 소셜 가입처럼 여러 repository 호출이 한 트랜잭션이어야 할 때 바깥 세션을 공유.
_current_session: ContextVar[AsyncSession | None] = ContextVar(
    "account_session", default=None
)


def _async_database_url(url: str) -> str:
    """postgresql(+psycopg 등) → postgresql+asyncpg. sqlite 등은 그대로."""
    parsed = make_url(url.strip())
    if parsed.get_backend_name() != "postgresql":
        return str(parsed)
    return str(parsed.set(drivername="postgresql+asyncpg"))


def get_engine() -> AsyncEngine | None:
    return _db_holder.engine


def get_async_session_maker() -> async_sessionmaker[AsyncSession] | None:
    return _db_holder.async_session_maker


def _build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # commit 뒤에도 User.id 등을 응답/JWT 발급에 쓰므로 expire하지 않음.
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def init_db() -> None:
    """lifespan에서 호출. 테스트가 이미 엔진을 주입했으면 건드리지 않는다."""
    if _db_holder.engine is not None:
        return
    if not settings.database_url:
        logger.warning("DATABASE_URL not set. Sign-up, sign-in and profile routes will fail.")
        return

    _db_holder.engine = create_async_engine(
        _async_database_url(settings.database_url),
        echo=False,
        pool_pre_ping=True,
    )
    _db_holder.async_session_maker = _build_session_maker(_db_holder.engine)


def override_db_for_testing(
    engine: AsyncEngine | None = None,
    async_session_maker_instance: async_sessionmaker[AsyncSession] | None = None,
) -> None:
    """엔진 교체. engine만 주면 세션 팩토리는 기본 옵션으로 생성, (None, None)이면 해제."""
    _db_holder.engine = engine
    if async_session_maker_instance is None and engine is not None:
        async_session_maker_instance = _build_session_maker(engine)
    _db_holder.async_session_maker = async_session_maker_instance


async def verify_db_connection() -> None:
    """
    부팅 시 계정 DB 도달 확인. DB_CONNECT_RETRIES회 SELECT 1,
    끝내 실패하면 RuntimeError로 lifespan을 중단해 로그인 불가 상태로 뜨지 않게 한다.
    """
    maker = get_async_session_maker()
    if not maker:
        return

    attempts = max(1, settings.db_connect_retries)
    delay = max(0.5, settings.db_connect_retry_interval_sec)
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            async with maker() as session:
                await session.execute(text("SELECT 1"))
            if attempt > 1:
                logger.info("Account database reachable after %d attempts", attempt)
            return
        except Exception as exc:
            last_error = exc
            if attempt < attempts:
                logger.warning(
                    "Account database not reachable (%d/%d): %s. Next try in %.1fs",
                    attempt,
                    attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)

    logger.critical(
        "Account database unreachable after %d attempts, stopping startup",
        attempts,
        exc_info=last_error,
    )
    raise RuntimeError(
        f"Account database unreachable after {attempts} attempts: {last_error}"
    ) from last_error


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession, None]:
    """
    서비스 레이어 쓰기 단위. 블록이 끝나면 commit, 예외면 rollback 후 재전파.
    (IntegrityError도 그대로 올라가야 소셜 가입 경합 처리가 동작한다.)
    안쪽 transaction()은 바깥 세션을 받고, commit/rollback은 바깥에서만.
    """
    maker = get_async_session_maker()
    if not maker:
        raise RuntimeError("Database not initialized. Set DATABASE_URL.")

    outer = _current_session.get()
    if outer is not None:
        yield outer
        return

    session = maker()
    token: Any = _current_session.set(session)
    try:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    finally:
        _current_session.reset(token)
        await session.close()
