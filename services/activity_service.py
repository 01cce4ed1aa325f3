"""
Activity log: the append-only audit trail shown on the dashboard.
"""
from datetime import datetime
from typing import List, Optional

from database.models import Activity, ActivityType
from database.repository import Repository


class ActivityService:
    """Service for the activity audit trail."""

    @staticmethod
    def log_action(
        repo: Repository,
        description: str,
        activity_type: ActivityType,
        location: str,
        officer: str,
        timestamp: Optional[datetime] = None
    ) -> Activity:
        """
        Append one activity entry.

        Args:
            repo: Repository
            description: Human-readable summary, e.g. "New officer added (A. Rao)"
            activity_type: new, updated or progress
            location: Free-text location label
            officer: Actor label
            timestamp: Defaults to now

        Returns:
            Created Activity
        """
        activity = Activity(
            description=description,
            type=activity_type,
            location=location,
            officer=officer,
            timestamp=timestamp or datetime.utcnow()
        )
        return repo.add(activity)

    @staticmethod
    def list(repo: Repository, limit: Optional[int] = None) -> List[Activity]:
        """Newest first; ties on timestamp go to the later insert."""
        return repo.list(Activity, order_by=["timestamp", "id"], descending=True, limit=limit)

    @staticmethod
    def get(repo: Repository, activity_id: int) -> Optional[Activity]:
        return repo.get(Activity, activity_id)
