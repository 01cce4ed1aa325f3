"""
User Management APIs (Admin).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from typing import Optional

from database.models import User
from database.repository import Repository
from auth.dependencies import get_repository, require_admin
from services.user_service import UserService
from routers.common import iso, enum_value


router = APIRouter(prefix="/api/users", tags=["users"])


# Request Models
class UserCreate(BaseModel):
    """Create user request."""
    email: EmailStr
    username: str
    password: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    profileImageUrl: Optional[str] = None
    role: str = "user"


class UserUpdate(BaseModel):
    """Update user request. isActive=false deactivates the account."""
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    password: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    profileImageUrl: Optional[str] = None
    role: Optional[str] = None
    isActive: Optional[bool] = None


RENAMES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "profileImageUrl": "profile_image_url",
    "isActive": "is_active",
}


def _to_data(body: BaseModel, exclude_unset: bool = False) -> dict:
    return {RENAMES.get(k, k): v for k, v in body.model_dump(exclude_unset=exclude_unset).items()}


def user_to_response(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "displayName": user.display_name,
        "profileImageUrl": user.profile_image_url,
        "role": enum_value(user.role),
        "isActive": user.is_active,
        "lastLogin": iso(user.last_login),
        "createdAt": iso(user.created_at),
        "updatedAt": iso(user.updated_at),
    }


@router.get("")
async def list_users(
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    return [user_to_response(u) for u in UserService.list(repo)]


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    user = UserService.get(repo, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user_to_response(user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    return user_to_response(UserService.create(repo, _to_data(body)))


@router.patch("/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    data = _to_data(body, exclude_unset=True)
    if data.get("is_active") is False:
        if user_id == current_user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
        data.pop("is_active")
        UserService.deactivate(repo, user_id)
    return user_to_response(UserService.update(repo, user_id, data))
