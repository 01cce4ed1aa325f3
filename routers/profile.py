"""
Profile APIs (All Authenticated Users).
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from database.models import User, UserRole, Profile
from database.repository import Repository
from auth.dependencies import get_repository, get_current_user
from services.profile_service import ProfileService
from services.user_service import UserService, SELF_SERVICE_FIELDS
from routers.common import iso
from routers.users import user_to_response


router = APIRouter(prefix="/api/profile", tags=["profile"])


class ProfileUpdate(BaseModel):
    """Profile update. Name and avatar live on the user; contact details on the profile."""
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    profileImageUrl: Optional[str] = None
    address: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[EmailStr] = None


def profile_to_response(user: User, profile: Optional[Profile]) -> dict:
    return {
        "userId": user.id,
        "user": user_to_response(user),
        "address": profile.address if profile else None,
        "phoneNumber": profile.phone_number if profile else None,
        "email": profile.email if profile else None,
        "updatedAt": iso(profile.updated_at) if profile else None,
    }


def _check_access(current_user: User, user_id: int) -> None:
    if current_user.id != user_id and current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own profile"
        )


@router.get("")
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository)
):
    return profile_to_response(current_user, ProfileService.get_by_user_id(repo, current_user.id))


@router.get("/{user_id}")
async def get_profile(
    user_id: int,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository)
):
    _check_access(current_user, user_id)
    user = UserService.get_or_404(repo, user_id)
    return profile_to_response(user, ProfileService.get_by_user_id(repo, user_id))


@router.patch("/{user_id}")
async def update_profile(
    user_id: int,
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository)
):
    """Create or update the profile; name fields are written through to the user."""
    _check_access(current_user, user_id)
    data = body.model_dump(exclude_unset=True)

    user_changes = {
        "first_name": data.get("firstName"),
        "last_name": data.get("lastName"),
        "profile_image_url": data.get("profileImageUrl"),
    }
    user_changes = {k: v for k, v in user_changes.items() if v is not None}
    if user_changes:
        user = UserService.update(repo, user_id, user_changes, allowed_fields=SELF_SERVICE_FIELDS)
    else:
        user = UserService.get_or_404(repo, user_id)

    profile = ProfileService.upsert(repo, user_id, {
        "address": data.get("address"),
        "phone_number": data.get("phoneNumber"),
        "email": data.get("email"),
    })
    return profile_to_response(user, profile)
