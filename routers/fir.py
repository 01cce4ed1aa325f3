"""
FIR (First Information Report) APIs.
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from pydantic import BaseModel
from typing import Optional

from database.models import User, UserRole, FirDetail, FirStatus
from database.repository import Repository
from auth.dependencies import get_repository, require_officer, require_user
from core.record_table import TableColumn, TableFilter
from services.fir_service import FirService
from routers.common import (
    iso, enum_value, actor_name, can_write, table_response, WRITE_ACTIONS, READ_ACTIONS
)


router = APIRouter(prefix="/api/fir", tags=["fir"])

WRITERS = [UserRole.ADMIN, UserRole.OFFICER]

COLUMNS = [
    TableColumn("FIR ID", "id"),
    TableColumn("Complainant", "complainantName"),
    TableColumn("Date Filed", "dateFiled"),
    TableColumn("Incident Type", "incidentType"),
    TableColumn("Police Station", "stationName"),
    TableColumn("Status", "status", render=lambda r: r["status"].capitalize()),
]
FILTERS = [
    TableFilter("status", "Status", options=[s.value for s in FirStatus]),
    TableFilter("incidentType", "Incident Type"),
    TableFilter("stationName", "Station"),
]


# Request Models
class FirCreate(BaseModel):
    """Register FIR request. stationName is derived from stationId."""
    id: Optional[str] = None
    complainantName: str
    complainantId: str
    userId: Optional[int] = None
    dateFiled: date
    incidentType: str
    stationId: str
    status: Optional[str] = None


class FirUpdate(BaseModel):
    """Update FIR request."""
    complainantName: Optional[str] = None
    complainantId: Optional[str] = None
    userId: Optional[int] = None
    dateFiled: Optional[date] = None
    incidentType: Optional[str] = None
    stationId: Optional[str] = None
    status: Optional[str] = None


RENAMES = {
    "complainantName": "complainant_name",
    "complainantId": "complainant_id",
    "userId": "user_id",
    "dateFiled": "date_filed",
    "incidentType": "incident_type",
    "stationId": "station_id",
}


def _to_data(body: BaseModel, exclude_unset: bool = False) -> dict:
    return {RENAMES.get(k, k): v for k, v in body.model_dump(exclude_unset=exclude_unset).items()}


def fir_to_response(fir: FirDetail) -> dict:
    return {
        "id": fir.id,
        "complainantName": fir.complainant_name,
        "complainantId": fir.complainant_id,
        "userId": fir.user_id,
        "dateFiled": iso(fir.date_filed),
        "incidentType": fir.incident_type,
        "stationId": fir.station_id,
        "stationName": fir.station_name,
        "status": enum_value(fir.status),
        "createdAt": iso(fir.created_at),
        "updatedAt": iso(fir.updated_at),
    }


@router.get("")
async def list_firs(
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    return [fir_to_response(f) for f in FirService.list(repo)]


@router.get("/table")
async def firs_table(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    incidentType: Optional[str] = Query(None),
    stationName: Optional[str] = Query(None),
    page: int = Query(1),
    sortBy: Optional[str] = Query(None),
    sortDir: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    actions = WRITE_ACTIONS if can_write(current_user, WRITERS) else READ_ACTIONS
    return table_response(
        [fir_to_response(f) for f in FirService.list(repo)],
        COLUMNS, FILTERS,
        {"status": status_filter, "incidentType": incidentType, "stationName": stationName},
        search=search, page=page, sort_by=sortBy, sort_dir=sortDir,
        actions=lambda row: actions,
    )


@router.get("/{fir_id}")
async def get_fir(
    fir_id: str,
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    fir = FirService.get(repo, fir_id)
    if fir is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="FIR not found")
    return fir_to_response(fir)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_fir(
    body: FirCreate,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    fir = FirService.create(repo, _to_data(body), actor=actor_name(current_user))
    return fir_to_response(fir)


@router.patch("/{fir_id}")
async def update_fir(
    fir_id: str,
    body: FirUpdate,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    fir = FirService.update(repo, fir_id, _to_data(body, exclude_unset=True), actor=actor_name(current_user))
    return fir_to_response(fir)


@router.delete("/{fir_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fir(
    fir_id: str,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    FirService.delete(repo, fir_id, actor=actor_name(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
