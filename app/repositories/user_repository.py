"""User Repository. DB 쿼리만 수행."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import AuthProvider, User


async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
    """id로 유저 조회."""
    return await session.get(User, user_id)


async def get_local_by_email(session: AsyncSession, email: str) -> User | None:
    """이메일 가입(provider=local) 유저 조회."""
    result = await session.execute(
        select(User).where(
            User.provider == AuthProvider.LOCAL,
            User.email == email,
        )
    )
    return result.scalars().one_or_none()


async def get_by_provider_id(
    session: AsyncSession, provider: AuthProvider, provider_id: str
) -> User | None:
    """provider + provider_id로 유저 조회."""
    result = await session.execute(
        select(User).where(
            User.provider == provider,
            User.provider_id == provider_id,
        )
    )
    return result.scalars().one_or_none()


async def add_user(session: AsyncSession, user: User) -> User:
    """INSERT 후 flush. 무결성 검증은 before_insert 훅에서."""
    session.add(user)
    await session.flush()
    return user
