"""
FIR (First Information Report) service. Keeps FirDetail.station_name in step
with the referenced station.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import FirDetail, FirStatus, PoliceStation, User, ActivityType
from database.repository import Repository
from core.exceptions import NotFoundError, ConflictError, ReferenceNotFoundError, ValidationError
from core.validators import require_text, parse_date, validate_enum, pick_fields
from core.logger import logger
from services.activity_service import ActivityService
from services.derived_fields import sync_fir_station_name
from services.record_id import generate_record_id, FIR_PREFIX

EDITABLE_FIELDS = (
    "complainant_name", "complainant_id", "user_id", "date_filed",
    "incident_type", "station_id", "status"
)
# An explicit None unlinks the complainant account
NULLABLE_FIELDS = ("user_id",)
TEXT_FIELDS = ("complainant_name", "complainant_id", "incident_type", "station_id")


def _require_station(repo: Repository, station_id: str) -> PoliceStation:
    station = repo.get(PoliceStation, station_id)
    if station is None:
        raise ReferenceNotFoundError(f"Police station {station_id} does not exist", field="station_id")
    return station


def _clean(repo: Repository, changes: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for field, value in changes.items():
        if field == "date_filed":
            cleaned[field] = parse_date(value, field)
        elif field == "status":
            cleaned[field] = validate_enum(value, FirStatus, field)
        elif field == "user_id":
            if value is not None and repo.get(User, value) is None:
                raise ReferenceNotFoundError(f"User {value} does not exist", field="user_id")
            cleaned[field] = value
        else:
            cleaned[field] = require_text(changes, field)
    return cleaned


class FirService:
    """Service for FIR records."""

    @staticmethod
    def list(repo: Repository) -> List[FirDetail]:
        return repo.list(FirDetail)

    @staticmethod
    def get(repo: Repository, fir_id: str) -> Optional[FirDetail]:
        return repo.get(FirDetail, fir_id)

    @staticmethod
    def get_or_404(repo: Repository, fir_id: str) -> FirDetail:
        fir = repo.get(FirDetail, fir_id)
        if fir is None:
            raise NotFoundError("FIR", fir_id)
        return fir

    @staticmethod
    def create(repo: Repository, data: Dict[str, Any], actor: Optional[str] = None) -> FirDetail:
        """
        Register an FIR. station_name is copied from the referenced station and
        status defaults to new.

        Args:
            repo: Repository
            data: complainant_name, complainant_id, date_filed, incident_type,
                station_id, optional status, user_id and id
            actor: Display name recorded on the activity entry

        Returns:
            Created FirDetail
        """
        for field in TEXT_FIELDS:
            require_text(data, field)
        if data.get("date_filed") is None:
            raise ValidationError("date_filed is required", field="date_filed")

        with repo.transaction():
            values = _clean(repo, pick_fields(data, EDITABLE_FIELDS))
            values.setdefault("status", FirStatus.NEW)
            _require_station(repo, values["station_id"])

            fir_id = data.get("id") or generate_record_id(repo, FirDetail, FIR_PREFIX)
            if repo.get(FirDetail, fir_id) is not None:
                raise ConflictError(f"FIR with ID {fir_id} already exists", field="id")

            fir = sync_fir_station_name(repo, FirDetail(id=fir_id, **values))
            repo.add(fir)
            ActivityService.log_action(
                repo,
                description=f"New FIR registered ({fir.incident_type})",
                activity_type=ActivityType.NEW,
                location=fir.station_name,
                officer=actor or "Duty Officer"
            )

        logger.info(f"FIR registered: {fir_id} at station {fir.station_id}")
        return fir

    @staticmethod
    def update(
        repo: Repository,
        fir_id: str,
        data: Dict[str, Any],
        actor: Optional[str] = None
    ) -> FirDetail:
        """Merge editable fields. A station change refreshes station_name."""
        with repo.transaction():
            changes = _clean(repo, pick_fields(data, EDITABLE_FIELDS, nullable=NULLABLE_FIELDS))
            fir = FirService.get_or_404(repo, fir_id)
            if "station_id" in changes and changes["station_id"] != fir.station_id:
                _require_station(repo, changes["station_id"])

            for field, value in changes.items():
                setattr(fir, field, value)
            sync_fir_station_name(repo, fir)
            fir.updated_at = datetime.utcnow()
            repo.save(fir)

            ActivityService.log_action(
                repo,
                description=f"FIR updated (Case #{fir_id})",
                activity_type=ActivityType.UPDATED,
                location=fir.station_name,
                officer=actor or "Investigating Officer"
            )

        logger.info(f"FIR updated: {fir_id} fields={sorted(changes)}")
        return fir

    @staticmethod
    def delete(repo: Repository, fir_id: str, actor: Optional[str] = None) -> None:
        with repo.transaction():
            fir = FirService.get_or_404(repo, fir_id)
            repo.delete(fir)
            ActivityService.log_action(
                repo,
                description=f"FIR deleted (Case #{fir_id})",
                activity_type=ActivityType.UPDATED,
                location=fir.station_name,
                officer=actor or "Admin"
            )

        logger.info(f"FIR deleted: {fir_id}")
