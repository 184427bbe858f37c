"""User·Profile Pydantic 스키마."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.models.user import AuthProvider

# 영문·숫자·특수문자(@$!%*#?&) 각 1자 이상, 첫 글자도 그 범위 안
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]")


class SignUpPayload(BaseModel):
    """이메일 회원가입. 서비스 약관·개인정보 처리방침은 동의 필수, 마케팅은 선택."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    service_agreed: bool
    privacy_agreed: bool
    marketing_agreed: bool = False

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError("Password must contain a letter, a digit and a special character")
        return value

    @model_validator(mode="after")
    def required_agreements(self) -> "SignUpPayload":
        if not (self.service_agreed and self.privacy_agreed):
            raise ValueError("Service terms and privacy policy must be agreed")
        return self


class UserResponse(BaseModel):
    """User 응답. 비밀번호 해시는 노출하지 않음."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    provider: AuthProvider
    provider_id: str | None = None
    service_agreed: bool
    privacy_agreed: bool
    marketing_agreed: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime


class ProfileCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nickname: str = Field(..., min_length=1, max_length=50)
    biography: str = Field("", max_length=2000)


class ProfileUpdate(BaseModel):
    """부분 수정. 보낸 필드만 반영."""

    model_config = ConfigDict(extra="forbid")

    nickname: str | None = Field(None, min_length=1, max_length=50)
    biography: str | None = Field(None, max_length=2000)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    nickname: str
    biography: str
