"""
Police station APIs.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from pydantic import BaseModel
from typing import Optional

from database.models import User, UserRole, PoliceStation
from database.repository import Repository
from auth.dependencies import get_repository, require_admin, require_user
from core.record_table import TableColumn
from services.station_service import StationService
from services.officer_service import OfficerService
from routers.common import iso, actor_name, can_write, table_response, WRITE_ACTIONS, READ_ACTIONS
from routers.officers import officer_to_response


router = APIRouter(prefix="/api/police-stations", tags=["police-stations"])

COLUMNS = [
    TableColumn("Station ID", "id"),
    TableColumn("Name", "name"),
    TableColumn("Address", "address"),
    TableColumn("Contact", "contact"),
    TableColumn("Officers", "officerCount"),
]


# Request Models
class StationCreate(BaseModel):
    """Create police station request."""
    id: Optional[str] = None
    name: str
    address: str
    contact: str


class StationUpdate(BaseModel):
    """Update police station request. officerCount is derived and not accepted."""
    name: Optional[str] = None
    address: Optional[str] = None
    contact: Optional[str] = None


def station_to_response(station: PoliceStation) -> dict:
    return {
        "id": station.id,
        "name": station.name,
        "address": station.address,
        "contact": station.contact,
        "officerCount": station.officer_count or 0,
        "createdAt": iso(station.created_at),
        "updatedAt": iso(station.updated_at),
    }


@router.get("")
async def list_stations(
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    return [station_to_response(s) for s in StationService.list(repo)]


@router.get("/table")
async def stations_table(
    search: Optional[str] = Query(None),
    page: int = Query(1),
    sortBy: Optional[str] = Query(None),
    sortDir: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """Searchable, paginated station list."""
    actions = WRITE_ACTIONS if can_write(current_user, [UserRole.ADMIN]) else READ_ACTIONS
    return table_response(
        [station_to_response(s) for s in StationService.list(repo)],
        COLUMNS, [], {},
        search=search, page=page, sort_by=sortBy, sort_dir=sortDir,
        actions=lambda row: actions,
    )


@router.get("/{station_id}")
async def get_station(
    station_id: str,
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    station = StationService.get(repo, station_id)
    if station is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Police station not found")
    return station_to_response(station)


@router.get("/{station_id}/officers")
async def list_station_officers(
    station_id: str,
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """Officers assigned to one station."""
    station = StationService.get_or_404(repo, station_id)
    return [officer_to_response(o, station.name) for o in OfficerService.list_by_station(repo, station_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_station(
    body: StationCreate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    station = StationService.create(repo, body.model_dump(), actor=actor_name(current_user))
    return station_to_response(station)


@router.patch("/{station_id}")
async def update_station(
    station_id: str,
    body: StationUpdate,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    station = StationService.update(
        repo, station_id, body.model_dump(exclude_unset=True), actor=actor_name(current_user)
    )
    return station_to_response(station)


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_station(
    station_id: str,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    StationService.delete(repo, station_id, actor=actor_name(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
