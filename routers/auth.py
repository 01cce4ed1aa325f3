"""
Authentication endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from database.models import User
from database.repository import Repository
from auth.dependencies import get_repository, get_current_user
from services.auth_service import AuthService
from services.profile_service import ProfileService
from routers.users import user_to_response


router = APIRouter(prefix="/api/auth", tags=["authentication"])


# Request Models
class LoginRequest(BaseModel):
    """Login request. username may also be the account email."""
    username: str
    password: str


@router.post("/login")
async def login(
    body: LoginRequest,
    repo: Repository = Depends(get_repository)
):
    session = AuthService.login(repo, body.username, body.password)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {
        "accessToken": session.access_token,
        "tokenType": session.token_type,
        "expiresAt": session.expires_at.isoformat(),
        "user": user_to_response(session.user),
    }


@router.get("/user")
async def get_auth_user(
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository)
):
    """The signed-in user, with their profile when one exists."""
    response = user_to_response(current_user)
    profile = ProfileService.get_by_user_id(repo, current_user.id)
    response["profile"] = {
        "address": profile.address,
        "phoneNumber": profile.phone_number,
        "email": profile.email,
    } if profile else None
    return response
