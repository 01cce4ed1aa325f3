"""
Criminal record APIs.
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from pydantic import BaseModel
from typing import List, Optional

from database.models import User, UserRole, Criminal, CriminalStatus
from database.repository import Repository
from auth.dependencies import get_repository, require_officer, require_user
from core.record_table import TableColumn, TableFilter
from services.criminal_service import CriminalService
from routers.common import (
    iso, enum_value, actor_name, can_write, table_response, WRITE_ACTIONS, READ_ACTIONS
)


router = APIRouter(prefix="/api/criminals", tags=["criminals"])

WRITERS = [UserRole.ADMIN, UserRole.OFFICER]

COLUMNS = [
    TableColumn("Criminal ID", "id"),
    TableColumn("Name", lambda r: f"{r['firstName']} {r['lastName']}"),
    TableColumn("Age", "age"),
    TableColumn("Gender", "gender"),
    TableColumn("Status", "status", render=lambda r: r["status"].capitalize()),
    TableColumn("Last Crime Date", "lastCrimeDate"),
    TableColumn("Crime Types", "crimeTypes"),
]
FILTERS = [
    TableFilter("status", "Status", options=[s.value for s in CriminalStatus]),
    TableFilter("gender", "Gender"),
]


# Request Models
class CriminalCreate(BaseModel):
    """Create criminal record request."""
    id: Optional[str] = None
    firstName: str
    lastName: str
    age: int
    gender: str
    status: str
    lastCrimeDate: date
    crimeTypes: List[str] = []
    photoUrl: Optional[str] = None


class CriminalUpdate(BaseModel):
    """Update criminal record request."""
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    status: Optional[str] = None
    lastCrimeDate: Optional[date] = None
    crimeTypes: Optional[List[str]] = None
    photoUrl: Optional[str] = None


RENAMES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "lastCrimeDate": "last_crime_date",
    "crimeTypes": "crime_types",
    "photoUrl": "photo_url",
}


def _to_data(body: BaseModel, exclude_unset: bool = False) -> dict:
    return {RENAMES.get(k, k): v for k, v in body.model_dump(exclude_unset=exclude_unset).items()}


def criminal_to_response(criminal: Criminal) -> dict:
    return {
        "id": criminal.id,
        "firstName": criminal.first_name,
        "lastName": criminal.last_name,
        "age": criminal.age,
        "gender": criminal.gender,
        "status": enum_value(criminal.status),
        "lastCrimeDate": iso(criminal.last_crime_date),
        "crimeTypes": list(criminal.crime_types or []),
        "photoUrl": criminal.photo_url,
        "createdAt": iso(criminal.created_at),
        "updatedAt": iso(criminal.updated_at),
    }


@router.get("")
async def list_criminals(
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    return [criminal_to_response(c) for c in CriminalService.list(repo)]


@router.get("/table")
async def criminals_table(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    gender: Optional[str] = Query(None),
    page: int = Query(1),
    sortBy: Optional[str] = Query(None),
    sortDir: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """Searchable criminal list (names, ids, crime types), filterable by status and gender."""
    actions = WRITE_ACTIONS if can_write(current_user, WRITERS) else READ_ACTIONS
    return table_response(
        [criminal_to_response(c) for c in CriminalService.list(repo)],
        COLUMNS, FILTERS, {"status": status_filter, "gender": gender},
        search=search, page=page, sort_by=sortBy, sort_dir=sortDir,
        actions=lambda row: actions,
    )


@router.get("/{criminal_id}")
async def get_criminal(
    criminal_id: str,
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    criminal = CriminalService.get(repo, criminal_id)
    if criminal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Criminal not found")
    return criminal_to_response(criminal)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_criminal(
    body: CriminalCreate,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    criminal = CriminalService.create(repo, _to_data(body), actor=actor_name(current_user))
    return criminal_to_response(criminal)


@router.patch("/{criminal_id}")
async def update_criminal(
    criminal_id: str,
    body: CriminalUpdate,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    criminal = CriminalService.update(
        repo, criminal_id, _to_data(body, exclude_unset=True), actor=actor_name(current_user)
    )
    return criminal_to_response(criminal)


@router.delete("/{criminal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_criminal(
    criminal_id: str,
    current_user: User = Depends(require_officer),
    repo: Repository = Depends(get_repository)
):
    CriminalService.delete(repo, criminal_id, actor=actor_name(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
