"""
Profile service: contact details attached one-to-one to a user.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from database.models import Profile, User
from database.repository import Repository
from core.exceptions import NotFoundError
from core.validators import pick_fields
from core.logger import logger

PROFILE_FIELDS = ("address", "phone_number", "email")


class ProfileService:
    """Service for user profiles."""

    @staticmethod
    def get_by_user_id(repo: Repository, user_id: int) -> Optional[Profile]:
        return repo.find_one(Profile, user_id=user_id)

    @staticmethod
    def upsert(repo: Repository, user_id: int, data: Dict[str, Any]) -> Profile:
        """
        Create or update the profile of an existing user.

        Raises:
            NotFoundError: If the user does not exist
        """
        changes = {
            k: v.strip() if isinstance(v, str) else v
            for k, v in pick_fields(data, PROFILE_FIELDS).items()
        }

        with repo.transaction():
            if repo.get(User, user_id) is None:
                raise NotFoundError("User", user_id)

            profile = ProfileService.get_by_user_id(repo, user_id)
            if profile is None:
                profile = repo.add(Profile(user_id=user_id, **changes))
                logger.info(f"Profile created for user {user_id}")
            else:
                for field, value in changes.items():
                    setattr(profile, field, value)
                profile.updated_at = datetime.utcnow()
                repo.save(profile)
                logger.info(f"Profile updated for user {user_id} fields={sorted(changes)}")

        return profile
