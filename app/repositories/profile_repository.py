"""UserProfile Repository. DB 쿼리만 수행."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_profile import UserProfile


async def get_by_user_id(session: AsyncSession, user_id: int) -> UserProfile | None:
    result = await session.execute(
        select(UserProfile).where(UserProfile.user_id == user_id)
    )
    return result.scalars().one_or_none()


async def add_profile(
    session: AsyncSession, user_id: int, nickname: str, biography: str = ""
) -> UserProfile:
    profile = UserProfile(user_id=user_id, nickname=nickname, biography=biography)
    session.add(profile)
    await session.flush()
    return profile
