"""
Authentication dependencies for FastAPI.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Security
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database.models import User
from database.repository import Repository, SqlRepository
from auth.security import security, decode_access_token
import config


def get_db_session():
    """Get database session."""
    if not config.db:
        raise HTTPException(status_code=503, detail="Database not initialized")
    with config.db.get_session() as session:
        yield session


def get_repository(db: Session = Depends(get_db_session)) -> Repository:
    """Repository bound to the request's session."""
    return SqlRepository(db)


def _credentials_error(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    repo: Repository = Depends(get_repository)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is gone,
            403 if the account is deactivated
    """
    if credentials is None:
        raise _credentials_error("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _credentials_error()

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise _credentials_error()

    user = repo.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return user


def require_role(allowed_roles: list[str]):
    """
    Dependency factory for role-based access control.

    Args:
        allowed_roles: List of allowed roles

    Returns:
        Dependency function
    """
    async def role_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if current_user.role.value not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(allowed_roles)}"
            )
        return current_user

    return role_checker


require_admin = require_role(["admin"])
require_officer = require_role(["admin", "officer"])
require_user = require_role(["admin", "officer", "user"])
