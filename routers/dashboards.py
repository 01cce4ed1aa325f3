"""
Dashboard APIs: headline statistics, recent activity and chart series.
"""
from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional

from database.models import User, Activity
from database.repository import Repository
from auth.dependencies import get_repository, require_user
from services.activity_service import ActivityService
from services.dashboard_service import DashboardService
from routers.common import iso, enum_value


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def activity_to_response(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "description": activity.description,
        "type": enum_value(activity.type),
        "location": activity.location,
        "officer": activity.officer,
        "timestamp": iso(activity.timestamp),
    }


@router.get("/stats")
async def get_stats(
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    return DashboardService.stats(repo)


@router.get("/activities")
async def get_activities(
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    """Recent activity, newest first."""
    return [activity_to_response(a) for a in ActivityService.list(repo, limit=limit)]


@router.get("/charts")
async def get_charts(
    asOf: Optional[date] = Query(None, description="Last month of the trend window (defaults to today)"),
    current_user: User = Depends(require_user),
    repo: Repository = Depends(get_repository)
):
    return DashboardService.chart_data(repo, as_of=asOf)
