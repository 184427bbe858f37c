"""User/UserProfile ORM: 저장 전 검증 훅과 프로필 CASCADE."""

import pytest
from sqlalchemy import func, select

from app.core.database import transaction
from app.models import AuthProvider, User, UserProfile, UserValidationError


def _user(**overrides) -> User:
    fields = {
        "email": "kim@example.com",
        "password_hash": "hashed",
        "provider": AuthProvider.LOCAL,
        "service_agreed": True,
        "privacy_agreed": True,
    }
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
async def test_local_user_requires_password(db_engine) -> None:
    with pytest.raises(UserValidationError):
        async with transaction() as session:
            session.add(_user(password_hash=None))
            await session.flush()


@pytest.mark.asyncio
async def test_social_user_requires_provider_id(db_engine) -> None:
    with pytest.raises(UserValidationError):
        async with transaction() as session:
            session.add(_user(provider=AuthProvider.KAKAO, password_hash=None, provider_id=None))
            await session.flush()


@pytest.mark.asyncio
async def test_invalid_email_rejected(db_engine) -> None:
    with pytest.raises(UserValidationError):
        async with transaction() as session:
            session.add(_user(email="not an email"))
            await session.flush()


@pytest.mark.asyncio
async def test_validation_runs_on_update(db_engine) -> None:
    """before_update에서도 검증."""
    async with transaction() as session:
        user = _user()
        session.add(user)
        await session.flush()
        user_id = user.id

    with pytest.raises(UserValidationError):
        async with transaction() as session:
            stored = await session.get(User, user_id)
            stored.email = "broken@"
            await session.flush()


@pytest.mark.asyncio
async def test_social_user_without_password_is_valid(db_engine) -> None:
    async with transaction() as session:
        user = _user(provider=AuthProvider.NAVER, password_hash=None, provider_id="naver-uid")
        session.add(user)
        await session.flush()
        assert user.id is not None
        assert user.marketing_agreed is False
        assert user.is_email_verified is False


@pytest.mark.asyncio
async def test_deleting_user_deletes_profile(db_engine) -> None:
    async with transaction() as session:
        user = _user(profile=UserProfile(nickname="kim", biography="hello"))
        session.add(user)
        await session.flush()
        user_id = user.id

    async with transaction() as session:
        stored = await session.get(User, user_id)
        assert stored.profile is not None
        assert stored.profile.nickname == "kim"
        await session.delete(stored)

    async with transaction() as session:
        count = await session.scalar(select(func.count()).select_from(UserProfile))
        assert count == 0
