# ORM models
from app.models.base import Base
from app.models.user import AuthProvider, User, UserValidationError
from app.models.user_profile import UserProfile

__all__ = [
    "AuthProvider",
    "Base",
    "User",
    "UserProfile",
    "UserValidationError",
]
