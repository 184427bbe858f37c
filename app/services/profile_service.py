"""Profile Service. 유저 프로필 조회/생성/부분 수정."""

from app.core.database import transaction
from app.models.user_profile import UserProfile
from app.repositories.profile_repository import add_profile, get_by_user_id
from app.repositories.user_repository import get_by_id
from app.schemas.user import ProfileCreate, ProfileUpdate


class UserNotFoundError(Exception):
    pass


class ProfileNotFoundError(Exception):
    pass


class ProfileAlreadyExistsError(Exception):
    pass


async def get_profile(user_id: int) -> UserProfile:
    async with transaction() as session:
        profile = await get_by_user_id(session, user_id)
        if profile is None:
            raise ProfileNotFoundError("Profile not found")
        return profile


async def create_profile(user_id: int, data: ProfileCreate) -> UserProfile:
    """유저당 하나. 이미 있으면 ProfileAlreadyExistsError."""
    async with transaction() as session:
        if await get_by_id(session, user_id) is None:
            raise UserNotFoundError("User not found")
        if await get_by_user_id(session, user_id) is not None:
            raise ProfileAlreadyExistsError("Profile already exists")
        return await add_profile(session, user_id, data.nickname, data.biography)


async def update_profile(user_id: int, data: ProfileUpdate) -> UserProfile:
    """보낸 필드만 반영(exclude_unset). null은 무시."""
    async with transaction() as session:
        profile = await get_by_user_id(session, user_id)
        if profile is None:
            raise ProfileNotFoundError("Profile not found")
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(profile, field, value)
        await session.flush()
        return profile
