"""
User account service.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import User, UserRole
from database.repository import Repository
from auth.security import get_password_hash, validate_password
from core.exceptions import NotFoundError, ConflictError, ValidationError
from core.validators import require_text, validate_enum, pick_fields
from core.logger import logger

SELF_SERVICE_FIELDS = ("first_name", "last_name", "profile_image_url")
ADMIN_FIELDS = SELF_SERVICE_FIELDS + ("email", "username", "role", "is_active")


def _hash_new_password(password: str) -> str:
    is_valid, error_message = validate_password(password)
    if not is_valid:
        raise ValidationError(error_message, field="password")
    return get_password_hash(password)


def _normalize_email(email: str) -> str:
    email = email.strip().lower()
    if "@" not in email:
        raise ValidationError("email is not a valid address", field="email")
    return email


class UserService:
    """Service for user accounts. Accounts are deactivated, never hard-deleted."""

    @staticmethod
    def list(repo: Repository) -> List[User]:
        return repo.list(User)

    @staticmethod
    def get(repo: Repository, user_id: int) -> Optional[User]:
        return repo.get(User, user_id)

    @staticmethod
    def get_or_404(repo: Repository, user_id: int) -> User:
        user = repo.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def get_by_email(repo: Repository, email: str) -> Optional[User]:
        return repo.find_one(User, email=email.strip().lower())

    @staticmethod
    def get_by_username(repo: Repository, username: str) -> Optional[User]:
        return repo.find_one(User, username=username.strip())

    @staticmethod
    def create(repo: Repository, data: Dict[str, Any]) -> User:
        """
        Create a user account.

        Args:
            repo: Repository
            data: email, username, password, optional first_name, last_name,
                profile_image_url and role (defaults to user)

        Returns:
            Created User
        """
        email = _normalize_email(require_text(data, "email"))
        username = require_text(data, "username")
        role = validate_enum(data.get("role") or UserRole.USER, UserRole, "role")
        hashed_password = _hash_new_password(data.get("password") or "")

        with repo.transaction():
            if UserService.get_by_email(repo, email) is not None:
                raise ConflictError("User with this email already exists", field="email")
            if UserService.get_by_username(repo, username) is not None:
                raise ConflictError("User with this username already exists", field="username")

            user = repo.add(User(
                email=email,
                username=username,
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
                profile_image_url=data.get("profile_image_url"),
                role=role,
                hashed_password=hashed_password,
                is_active=True
            ))

        logger.info(f"User created: {username} ({role.value})")
        return user

    @staticmethod
    def update(
        repo: Repository,
        user_id: int,
        data: Dict[str, Any],
        allowed_fields=ADMIN_FIELDS
    ) -> User:
        """Merge the allowed fields. A password key re-hashes the password."""
        changes = pick_fields(data, allowed_fields)
        if "email" in changes:
            changes["email"] = _normalize_email(changes["email"])
        if "username" in changes:
            changes["username"] = require_text(changes, "username")
        if "role" in changes:
            changes["role"] = validate_enum(changes["role"], UserRole, "role")
        password = data.get("password")

        with repo.transaction():
            user = UserService.get_or_404(repo, user_id)
            if "email" in changes:
                existing = UserService.get_by_email(repo, changes["email"])
                if existing is not None and existing.id != user_id:
                    raise ConflictError("User with this email already exists", field="email")
            if "username" in changes:
                existing = UserService.get_by_username(repo, changes["username"])
                if existing is not None and existing.id != user_id:
                    raise ConflictError("User with this username already exists", field="username")

            for field, value in changes.items():
                setattr(user, field, value)
            if password:
                user.hashed_password = _hash_new_password(password)
            user.updated_at = datetime.utcnow()
            repo.save(user)

        logger.info(f"User updated: {user_id} fields={sorted(changes)}")
        return user

    @staticmethod
    def deactivate(repo: Repository, user_id: int) -> User:
        with repo.transaction():
            user = UserService.get_or_404(repo, user_id)
            user.is_active = False
            user.updated_at = datetime.utcnow()
            repo.save(user)

        logger.info(f"User deactivated: {user_id}")
        return user

    @staticmethod
    def record_login(repo: Repository, user: User) -> User:
        user.last_login = datetime.utcnow()
        return repo.save(user)

    @staticmethod
    def upsert(repo: Repository, data: Dict[str, Any]) -> User:
        """Create the user, or update the account that already holds the email or username."""
        existing = None
        if data.get("email"):
            existing = UserService.get_by_email(repo, data["email"])
        if existing is None and data.get("username"):
            existing = UserService.get_by_username(repo, data["username"])
        if existing is None:
            return UserService.create(repo, data)
        return UserService.update(repo, existing.id, data)
