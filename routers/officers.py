"""
Officer APIs.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from pydantic import BaseModel
from typing import Dict, List, Optional

from database.models import User, UserRole, Officer, PoliceStation
from database.repository import Repository
from auth.dependencies import get_repository, require_admin, require_user
from core.record_table import TableColumn, TableFilter
from services.officer_service import OfficerService
from services.station_service import StationService
from routers.common import iso, actor_name, can_write, table_response, WRITE_ACTIONS, READ_ACTIONS


router = APIRouter(prefix="/api/officers", tags=["officers"])

COLUMNS = [
    TableColumn("Officer ID", "id"),
    TableColumn("Name", "name"),
    TableColumn("Badge Number", "badgeNumber"),
    TableColumn("Rank", "rank"),
    TableColumn("Station", "stationName"),
]
FILTERS = [
    TableFilter("stationName", "Station"),
    TableFilter("rank", "Rank"),
]


# Request Models
class OfficerCreate(BaseModel):
    """Create officer request."""
    id: Optional[str] = None
    name: str
    badgeNumber: str
    rank: str
    stationId: str


class OfficerUpdate(BaseModel):
    """Update officer request. Changing stationId transfers the officer."""
    name: Optional[str] = None
    badgeNumber: Optional[str] = None
    rank: Optional[str] = None
    stationId: Optional[str] = None


def _to_data(body: BaseModel, exclude_unset: bool = False) -> dict:
    raw = body.model_dump(exclude_unset=exclude_unset)
    renames = {"badgeNumber": "badge_number", "stationId": "station_id"}
    return {renames.get(k, k): v for k, v in raw.items()}


def officer_to_response(officer: Officer, station_name: Optional[str] = None) -> dict:
    return {
        "id": officer.id,
        "name": officer.name,
        "badgeNumber": officer.badge_number,
        "rank": officer.rank,
        "stationId": officer.station_id,
        "stationName": station_name or "",
        "createdAt": iso(officer.created_at),
        "updatedAt": iso(officer.updated_at),
    }


def _station_names(repo: Repository) -> Dict[str, str]:
    return {s.id: s.name for s in StationService.list(repo)}


def _officer_rows(repo: Repository) -> List[dict]:
    names = _station_names(repo)
    return [officer_to_response(o, names.get(o.station_id)) for o in OfficerService.list(repo)]


@router.get("")
async def list_officers(
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """All officers, each with the name of their station."""
    return _officer_rows(repo)


@router.get("/table")
async def officers_table(
    search: Optional[str] = Query(None),
    stationName: Optional[str] = Query(None),
    rank: Optional[str] = Query(None),
    page: int = Query(1),
    sortBy: Optional[str] = Query(None),
    sortDir: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """Searchable officer list, filterable by station and rank."""
    actions = WRITE_ACTIONS if can_write(current_user, [UserRole.ADMIN]) else READ_ACTIONS
    return table_response(
        _officer_rows(repo),
        COLUMNS, FILTERS, {"stationName": stationName, "rank": rank},
        search=search, page=page, sort_by=sortBy, sort_dir=sortDir,
        actions=lambda row: actions,
    )


@router.get("/{officer_id}")
async def get_officer(
    officer_id: str,
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    officer = OfficerService.get(repo, officer_id)
    if officer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Officer not found")
    station = repo.get(PoliceStation, officer.station_id)
    return officer_to_response(officer, station.name if station else None)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_officer(
    body: OfficerCreate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    officer = OfficerService.create(repo, _to_data(body), actor=actor_name(current_user))
    station = repo.get(PoliceStation, officer.station_id)
    return officer_to_response(officer, station.name if station else None)


@router.patch("/{officer_id}")
async def update_officer(
    officer_id: str,
    body: OfficerUpdate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    officer = OfficerService.update(
        repo, officer_id, _to_data(body, exclude_unset=True), actor=actor_name(current_user)
    )
    station = repo.get(PoliceStation, officer.station_id)
    return officer_to_response(officer, station.name if station else None)


@router.delete("/{officer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_officer(
    officer_id: str,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    OfficerService.delete(repo, officer_id, actor=actor_name(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
