"""
Officer service. Keeps PoliceStation.officer_count in step with officer writes.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import PoliceStation, Officer, ActivityType
from database.repository import Repository
from core.exceptions import NotFoundError, ConflictError, ReferenceNotFoundError
from core.validators import require_text, pick_fields
from core.logger import logger
from services.activity_service import ActivityService
from services.derived_fields import adjust_officer_count, transfer_officer
from services.record_id import generate_record_id, OFFICER_PREFIX

EDITABLE_FIELDS = ("name", "badge_number", "rank", "station_id")
DEFAULT_ACTOR = "Admin"


def _require_station(repo: Repository, station_id: str) -> PoliceStation:
    station = repo.get(PoliceStation, station_id)
    if station is None:
        raise ReferenceNotFoundError(f"Police station {station_id} does not exist", field="station_id")
    return station


def _check_badge(repo: Repository, badge_number: str, officer_id: Optional[str] = None) -> None:
    existing = repo.find_one(Officer, badge_number=badge_number)
    if existing is not None and existing.id != officer_id:
        raise ConflictError(f"Badge number {badge_number} is already assigned", field="badge_number")


class OfficerService:
    """Service for officer records."""

    @staticmethod
    def list(repo: Repository) -> List[Officer]:
        return repo.list(Officer)

    @staticmethod
    def list_by_station(repo: Repository, station_id: str) -> List[Officer]:
        return repo.filter_by(Officer, station_id=station_id)

    @staticmethod
    def get(repo: Repository, officer_id: str) -> Optional[Officer]:
        return repo.get(Officer, officer_id)

    @staticmethod
    def get_or_404(repo: Repository, officer_id: str) -> Officer:
        officer = repo.get(Officer, officer_id)
        if officer is None:
            raise NotFoundError("Officer", officer_id)
        return officer

    @staticmethod
    def create(repo: Repository, data: Dict[str, Any], actor: Optional[str] = None) -> Officer:
        """
        Create an officer and increment the station's officer_count.

        Args:
            repo: Repository
            data: name, badge_number, rank, station_id and optionally id
            actor: Display name recorded on the activity entry

        Returns:
            Created Officer
        """
        name = require_text(data, "name")
        badge_number = require_text(data, "badge_number", "badgeNumber")
        rank = require_text(data, "rank")
        station_id = require_text(data, "station_id", "stationId")

        with repo.transaction():
            station = _require_station(repo, station_id)
            _check_badge(repo, badge_number)

            officer_id = data.get("id") or generate_record_id(repo, Officer, OFFICER_PREFIX)
            if repo.get(Officer, officer_id) is not None:
                raise ConflictError(f"Officer with ID {officer_id} already exists", field="id")

            officer = repo.add(Officer(
                id=officer_id,
                name=name,
                badge_number=badge_number,
                rank=rank,
                station_id=station_id
            ))
            adjust_officer_count(repo, station_id, +1)
            ActivityService.log_action(
                repo,
                description=f"New officer added ({name})",
                activity_type=ActivityType.NEW,
                location=station.name,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Officer created: {officer_id} ({name}) at station {station_id}")
        return officer

    @staticmethod
    def update(
        repo: Repository,
        officer_id: str,
        data: Dict[str, Any],
        actor: Optional[str] = None
    ) -> Officer:
        """Merge editable fields. A station change moves one count from the old station to the new."""
        changes = pick_fields(data, EDITABLE_FIELDS)
        for field in changes:
            changes[field] = require_text(changes, field)

        with repo.transaction():
            officer = OfficerService.get_or_404(repo, officer_id)
            old_station_id = officer.station_id
            transferred = "station_id" in changes and changes["station_id"] != old_station_id

            if transferred:
                _require_station(repo, changes["station_id"])
            if "badge_number" in changes:
                _check_badge(repo, changes["badge_number"], officer_id)

            for field, value in changes.items():
                setattr(officer, field, value)
            officer.updated_at = datetime.utcnow()
            repo.save(officer)

            if transferred:
                transfer_officer(repo, old_station_id, officer.station_id)

            ActivityService.log_action(
                repo,
                description=f"Officer details updated ({officer.name})",
                activity_type=ActivityType.UPDATED,
                location="Transferred" if transferred else "Updated",
                officer=actor or officer.name
            )

        if transferred:
            logger.info(f"Officer {officer_id} transferred {old_station_id} -> {officer.station_id}")
        logger.info(f"Officer updated: {officer_id} fields={sorted(changes)}")
        return officer

    @staticmethod
    def delete(repo: Repository, officer_id: str, actor: Optional[str] = None) -> None:
        """Delete an officer and decrement the station's officer_count."""
        with repo.transaction():
            officer = OfficerService.get_or_404(repo, officer_id)
            station = repo.get(PoliceStation, officer.station_id)

            repo.delete(officer)
            adjust_officer_count(repo, officer.station_id, -1)
            ActivityService.log_action(
                repo,
                description=f"Officer removed ({officer.name})",
                activity_type=ActivityType.UPDATED,
                location=station.name if station is not None else "Unknown",
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Officer deleted: {officer_id}")
