"""
Criminal record service.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import Criminal, CriminalStatus, ActivityType
from database.repository import Repository
from core.exceptions import NotFoundError, ConflictError, ValidationError
from core.validators import (
    require_text, validate_age, parse_date, validate_enum, validate_tags, pick_fields
)
from core.logger import logger
from services.activity_service import ActivityService
from services.record_id import generate_record_id, CRIMINAL_PREFIX

EDITABLE_FIELDS = (
    "first_name", "last_name", "age", "gender", "status",
    "last_crime_date", "crime_types", "photo_url"
)
NULLABLE_FIELDS = ("photo_url",)
RECORDS_LOCATION = "Records Department"
DEFAULT_ACTOR = "Records Officer"


def _full_name(criminal: Criminal) -> str:
    return f"{criminal.first_name} {criminal.last_name}"


def _clean(changes: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for field, value in changes.items():
        if field == "age":
            cleaned[field] = validate_age(value)
        elif field == "status":
            cleaned[field] = validate_enum(value, CriminalStatus, field)
        elif field == "last_crime_date":
            cleaned[field] = parse_date(value, field)
        elif field == "crime_types":
            cleaned[field] = validate_tags(value, field)
        elif field == "photo_url":
            cleaned[field] = (value.strip() or None) if isinstance(value, str) else None
        else:
            cleaned[field] = require_text(changes, field)
    return cleaned


class CriminalService:
    """Service for criminal records."""

    @staticmethod
    def list(repo: Repository) -> List[Criminal]:
        return repo.list(Criminal)

    @staticmethod
    def get(repo: Repository, criminal_id: str) -> Optional[Criminal]:
        return repo.get(Criminal, criminal_id)

    @staticmethod
    def get_or_404(repo: Repository, criminal_id: str) -> Criminal:
        criminal = repo.get(Criminal, criminal_id)
        if criminal is None:
            raise NotFoundError("Criminal", criminal_id)
        return criminal

    @staticmethod
    def create(repo: Repository, data: Dict[str, Any], actor: Optional[str] = None) -> Criminal:
        """
        Create a criminal record.

        Args:
            repo: Repository
            data: first_name, last_name, age, gender, status, last_crime_date,
                crime_types, optional photo_url and id
            actor: Display name recorded on the activity entry

        Returns:
            Created Criminal
        """
        for field in ("first_name", "last_name", "gender"):
            require_text(data, field)
        for field in ("age", "status", "last_crime_date"):
            if data.get(field) is None:
                raise ValidationError(f"{field} is required", field=field)
        values = _clean(pick_fields(data, EDITABLE_FIELDS))
        values.setdefault("crime_types", [])

        with repo.transaction():
            criminal_id = data.get("id") or generate_record_id(repo, Criminal, CRIMINAL_PREFIX)
            if repo.get(Criminal, criminal_id) is not None:
                raise ConflictError(f"Criminal with ID {criminal_id} already exists", field="id")

            criminal = repo.add(Criminal(id=criminal_id, **values))
            ActivityService.log_action(
                repo,
                description=f"New criminal record added ({_full_name(criminal)})",
                activity_type=ActivityType.NEW,
                location=RECORDS_LOCATION,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Criminal record created: {criminal_id}")
        return criminal

    @staticmethod
    def update(
        repo: Repository,
        criminal_id: str,
        data: Dict[str, Any],
        actor: Optional[str] = None
    ) -> Criminal:
        changes = _clean(pick_fields(data, EDITABLE_FIELDS, nullable=NULLABLE_FIELDS))

        with repo.transaction():
            criminal = CriminalService.get_or_404(repo, criminal_id)
            for field, value in changes.items():
                setattr(criminal, field, value)
            criminal.updated_at = datetime.utcnow()
            repo.save(criminal)

            ActivityService.log_action(
                repo,
                description=f"Criminal record updated ({_full_name(criminal)})",
                activity_type=ActivityType.UPDATED,
                location=RECORDS_LOCATION,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Criminal record updated: {criminal_id} fields={sorted(changes)}")
        return criminal

    @staticmethod
    def delete(repo: Repository, criminal_id: str, actor: Optional[str] = None) -> None:
        with repo.transaction():
            criminal = CriminalService.get_or_404(repo, criminal_id)
            repo.delete(criminal)
            ActivityService.log_action(
                repo,
                description=f"Criminal record deleted ({_full_name(criminal)})",
                activity_type=ActivityType.UPDATED,
                location=RECORDS_LOCATION,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Criminal record deleted: {criminal_id}")
