"""
Demo data seeding APIs.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Optional

from database.models import User
from database.repository import Repository
from auth.dependencies import get_repository, require_admin
from services.seed_service import SeedService, SeedCounts
from core.logger import logger
import config


router = APIRouter(prefix="/api/seed", tags=["seed"])


class SeedRequest(BaseModel):
    """Seed request. Omitted counts fall back to the configured defaults."""
    stations: int = Field(config.SEED_STATIONS, ge=0, le=1000)
    officers: int = Field(config.SEED_OFFICERS, ge=0, le=5000)
    criminals: int = Field(config.SEED_CRIMINALS, ge=0, le=5000)
    firDetails: int = Field(config.SEED_FIR_DETAILS, ge=0, le=5000)
    seed: Optional[int] = None
    clear: bool = False


@router.post("")
async def seed_database(
    body: Optional[SeedRequest] = None,
    current_user: User = Depends(require_admin),
    repo: Repository = Depends(get_repository)
):
    body = body or SeedRequest()
    logger.info(f"Seed requested by {current_user.username}")
    created = SeedService.seed(
        repo,
        counts=SeedCounts(
            stations=body.stations,
            officers=body.officers,
            criminals=body.criminals,
            fir_details=body.firDetails,
        ),
        rng_seed=body.seed,
        clear=body.clear,
    )
    return {"message": "Database seeded successfully", "created": created}


@router.get("/status")
async def seed_status(repo: Repository = Depends(get_repository)):
    return SeedService.status(repo)
