"""User 모델. 로컬 가입(비밀번호)과 소셜 가입(provider_id)을 한 테이블에서 관리."""

from __future__ import annotations

import enum
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user_profile import UserProfile

from sqlalchemy import Boolean, DateTime, Enum, String, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class AuthProvider(str, enum.Enum):
    """가입 경로 태그."""

    LOCAL = "local"
    KAKAO = "kakao"
    GOOGLE = "google"
    NAVER = "naver"


class UserValidationError(ValueError):
    """저장 직전 무결성 검증 실패. Router에서 400으로 변환."""

    pass


class User(Base):
    """유저. provider=local이면 password_hash, 소셜이면 provider_id 필수."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_user_provider_id"),
        UniqueConstraint("provider", "email", name="uq_user_provider_email"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    # 기본 조회 응답에 포함하지 않음. 로컬 가입만 값 있음.
    password_hash: Mapped[str | None] = mapped_column(String(256), nullable=True)
    provider: Mapped[AuthProvider] = mapped_column(
        Enum(
            AuthProvider,
            name="auth_provider",
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=AuthProvider.LOCAL,
    )
    provider_id: Mapped[str | None] = mapped_column(String(256), nullable=True)

    # 약관 동의
    service_agreed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    privacy_agreed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    marketing_agreed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # user 조회 시 profile 함께 로드(selectin). 유저 삭제 시 프로필도 삭제.
    profile: Mapped["UserProfile | None"] = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def validate_provider_fields(self) -> None:
        """로컬은 비밀번호, 소셜은 provider_id 필수. 이메일 형식 검사."""
        provider = AuthProvider(self.provider or AuthProvider.LOCAL)
        if provider is AuthProvider.LOCAL and not self.password_hash:
            raise UserValidationError("Local sign-up requires a password")
        if provider is not AuthProvider.LOCAL and not self.provider_id:
            raise UserValidationError("Social sign-in requires a provider id")
        if not self.email or not EMAIL_PATTERN.match(self.email):
            raise UserValidationError("Invalid email format")


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _validate_user_before_write(mapper, connection, target: User) -> None:
    target.validate_provider_fields()
