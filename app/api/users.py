"""이메일 회원가입·로그인, 유저 프로필 API."""

from fastapi import APIRouter, Depends, HTTPException

from app.core.deps import get_current_user_id
from app.schemas.auth import SignInPayload, TokenResponse
from app.schemas.user import (
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    SignUpPayload,
    UserResponse,
)
from app.services import profile_service
from app.services.auth_service import AuthError, UserAlreadyExistsError, sign_in, sign_up

router = APIRouter(prefix="/user", tags=["user"])


@router.post("", response_model=UserResponse, status_code=201)
async def post_sign_up(payload: SignUpPayload) -> UserResponse:
    """이메일 회원가입."""
    try:
        user = await sign_up(payload)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return UserResponse.model_validate(user)


@router.post("/sign-in", response_model=TokenResponse)
async def post_sign_in(payload: SignInPayload) -> TokenResponse:
    """이메일 로그인. Access JWT 반환."""
    try:
        return await sign_in(payload)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e


def require_owner(user_id: int, current_user_id: int = Depends(get_current_user_id)) -> int:
    """경로의 user_id와 토큰 sub가 같아야 함."""
    if user_id != current_user_id:
        raise HTTPException(status_code=403, detail="Not allowed to access this profile")
    return user_id


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(owner_id: int = Depends(require_owner)) -> ProfileResponse:
    try:
        profile = await profile_service.get_profile(owner_id)
    except profile_service.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ProfileResponse.model_validate(profile)


@router.post("/{user_id}/profile", response_model=ProfileResponse, status_code=201)
async def post_profile(
    payload: ProfileCreate, owner_id: int = Depends(require_owner)
) -> ProfileResponse:
    try:
        profile = await profile_service.create_profile(owner_id, payload)
    except profile_service.UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except profile_service.ProfileAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return ProfileResponse.model_validate(profile)


@router.patch("/{user_id}/profile", response_model=ProfileResponse)
async def patch_profile(
    payload: ProfileUpdate, owner_id: int = Depends(require_owner)
) -> ProfileResponse:
    try:
        profile = await profile_service.update_profile(owner_id, payload)
    except profile_service.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ProfileResponse.model_validate(profile)
