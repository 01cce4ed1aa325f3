"""
Authentication service: pluggable identity providers issuing JWT sessions.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from database.models import User, UserRole
from database.repository import Repository
from auth.security import verify_password, create_access_token
from core.logger import logger
from services.user_service import UserService
import config


@dataclass
class Credentials:
    """Login form input. login_id is a username or an email."""
    login_id: str
    password: str


@dataclass
class AuthSession:
    """An authenticated user together with the bearer token issued for them."""
    user: User
    access_token: str
    expires_at: datetime
    token_type: str = "bearer"


def issue_session(user: User) -> AuthSession:
    expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(
        {"sub": user.id, "role": user.role.value, "email": user.email},
        expires_delta=expires_delta
    )
    return AuthSession(user=user, access_token=token, expires_at=datetime.utcnow() + expires_delta)


class IdentityProvider(ABC):
    """Source of truth for who a set of credentials belongs to."""

    @abstractmethod
    def authenticate(self, repo: Repository, credentials: Credentials) -> Optional[AuthSession]:
        """Return a session for valid credentials, otherwise None."""


class PasswordIdentityProvider(IdentityProvider):
    """Username-or-email plus bcrypt password, checked against the users table."""

    def authenticate(self, repo: Repository, credentials: Credentials) -> Optional[AuthSession]:
        login_id = (credentials.login_id or "").strip()
        if not login_id or not credentials.password:
            return None

        user = UserService.get_by_username(repo, login_id)
        # Allow login by email
        if user is None and "@" in login_id:
            user = UserService.get_by_email(repo, login_id)
        if user is None:
            logger.warning(f"Login attempt for unknown account: {login_id}")
            return None

        if not verify_password(credentials.password, user.hashed_password):
            logger.warning(f"Failed login for account: {login_id}")
            return None

        if not user.is_active:
            logger.warning(f"Login attempt for inactive account: {login_id}")
            return None

        with repo.transaction():
            UserService.record_login(repo, user)
        return issue_session(user)


class AuthService:
    """Service for authentication operations."""

    provider: IdentityProvider = PasswordIdentityProvider()

    @staticmethod
    def login(repo: Repository, login_id: str, password: str) -> Optional[AuthSession]:
        """
        Authenticate through the configured identity provider.

        Returns:
            AuthSession if the credentials are valid, None otherwise
        """
        session = AuthService.provider.authenticate(repo, Credentials(login_id=login_id, password=password))
        if session is not None:
            logger.info(f"User logged in: {session.user.username}")
        return session

    @staticmethod
    def ensure_admin(
        repo: Repository,
        email: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> Optional[User]:
        """
        Create or refresh the bootstrap admin from config.

        Does nothing unless email, username and password are all set.
        """
        email = email if email is not None else config.DEFAULT_ADMIN_EMAIL
        username = username if username is not None else config.DEFAULT_ADMIN_USERNAME
        password = password if password is not None else config.DEFAULT_ADMIN_PASSWORD
        if not (email and username and password):
            return None

        existing = UserService.get_by_email(repo, email) or UserService.get_by_username(repo, username)
        if existing is not None and existing.role == UserRole.ADMIN and existing.is_active:
            return existing

        user = UserService.upsert(repo, {
            "email": email,
            "username": username,
            "password": password,
            "role": UserRole.ADMIN,
            "is_active": True,
        })
        logger.info(f"Bootstrap admin ready: {username}")
        return user
