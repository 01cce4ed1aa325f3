"""
Police station service.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import PoliceStation, Officer, FirDetail, ActivityType
from database.repository import Repository
from core.exceptions import NotFoundError, ConflictError, ReferenceInUseError
from core.validators import require_text, pick_fields
from core.logger import logger
from services.activity_service import ActivityService
from services.derived_fields import propagate_station_rename
from services.record_id import generate_record_id, STATION_PREFIX

EDITABLE_FIELDS = ("name", "address", "contact")
DEFAULT_ACTOR = "Admin"


class StationService:
    """Service for police station records."""

    @staticmethod
    def list(repo: Repository) -> List[PoliceStation]:
        return repo.list(PoliceStation)

    @staticmethod
    def get(repo: Repository, station_id: str) -> Optional[PoliceStation]:
        return repo.get(PoliceStation, station_id)

    @staticmethod
    def get_or_404(repo: Repository, station_id: str) -> PoliceStation:
        station = repo.get(PoliceStation, station_id)
        if station is None:
            raise NotFoundError("Police station", station_id)
        return station

    @staticmethod
    def create(repo: Repository, data: Dict[str, Any], actor: Optional[str] = None) -> PoliceStation:
        """
        Create a station. officer_count always starts at zero.

        Args:
            repo: Repository
            data: name, address, contact and optionally id
            actor: Display name recorded on the activity entry

        Returns:
            Created PoliceStation
        """
        name = require_text(data, "name")
        address = require_text(data, "address")
        contact = require_text(data, "contact")

        with repo.transaction():
            station_id = data.get("id") or generate_record_id(repo, PoliceStation, STATION_PREFIX)
            if repo.get(PoliceStation, station_id) is not None:
                raise ConflictError(f"Police station with ID {station_id} already exists", field="id")

            station = repo.add(PoliceStation(
                id=station_id,
                name=name,
                address=address,
                contact=contact,
                officer_count=0
            ))
            ActivityService.log_action(
                repo,
                description=f"New police station added ({name})",
                activity_type=ActivityType.NEW,
                location=name,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Police station created: {station_id} ({name})")
        return station

    @staticmethod
    def update(
        repo: Repository,
        station_id: str,
        data: Dict[str, Any],
        actor: Optional[str] = None
    ) -> PoliceStation:
        """Merge editable fields. A rename is pushed to every FIR filed at the station."""
        changes = pick_fields(data, EDITABLE_FIELDS)
        for field in changes:
            require_text(changes, field)

        with repo.transaction():
            station = StationService.get_or_404(repo, station_id)
            renamed = "name" in changes and changes["name"].strip() != station.name

            for field, value in changes.items():
                setattr(station, field, value.strip())
            station.updated_at = datetime.utcnow()
            repo.save(station)

            if renamed:
                propagate_station_rename(repo, station)

            ActivityService.log_action(
                repo,
                description=f"Police station updated ({station.name})",
                activity_type=ActivityType.UPDATED,
                location=station.name,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Police station updated: {station_id} fields={sorted(changes)}")
        return station

    @staticmethod
    def delete(repo: Repository, station_id: str, actor: Optional[str] = None) -> None:
        """Delete a station that no officer or FIR references."""
        with repo.transaction():
            station = StationService.get_or_404(repo, station_id)

            officers = repo.count(Officer, station_id=station_id)
            firs = repo.count(FirDetail, station_id=station_id)
            if officers or firs:
                raise ReferenceInUseError(
                    f"Police station {station_id} is still referenced by "
                    f"{officers} officer(s) and {firs} FIR(s)"
                )

            repo.delete(station)
            ActivityService.log_action(
                repo,
                description=f"Police station deleted ({station.name})",
                activity_type=ActivityType.UPDATED,
                location=station.name,
                officer=actor or DEFAULT_ACTOR
            )

        logger.info(f"Police station deleted: {station_id}")
