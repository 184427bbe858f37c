# Pydantic schemas
from app.schemas.auth import (
    LoginUrlResponse,
    RevokePayload,
    SignInPayload,
    SocialLoginPayload,
    TokenResponse,
)
from app.schemas.user import (
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    SignUpPayload,
    UserResponse,
)

__all__ = [
    "LoginUrlResponse",
    "ProfileCreate",
    "ProfileResponse",
    "ProfileUpdate",
    "RevokePayload",
    "SignInPayload",
    "SignUpPayload",
    "SocialLoginPayload",
    "TokenResponse",
    "UserResponse",
]
