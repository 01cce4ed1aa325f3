"""
Maintenance of denormalized fields.

PoliceStation.officer_count and FirDetail.station_name are derived from other
tables. Nothing else writes them; every function here must run inside the
caller's repo.transaction() together with the write that triggered it.
"""
from typing import Optional

from database.models import PoliceStation, Officer, FirDetail
from database.repository import Repository
from core.logger import logger


def adjust_officer_count(repo: Repository, station_id: Optional[str], delta: int) -> None:
    """Add delta to a station's officer_count. Missing stations are ignored."""
    if station_id is None:
        return
    repo.increment(PoliceStation, station_id, "officer_count", delta, minimum=0)


def transfer_officer(repo: Repository, old_station_id: Optional[str], new_station_id: Optional[str]) -> None:
    """Move one officer's weight from the old station to the new one."""
    if old_station_id == new_station_id:
        return
    adjust_officer_count(repo, old_station_id, -1)
    adjust_officer_count(repo, new_station_id, +1)


def sync_fir_station_name(repo: Repository, fir: FirDetail) -> FirDetail:
    """Copy the referenced station's current name onto the FIR (not saved)."""
    station = repo.get(PoliceStation, fir.station_id)
    fir.station_name = station.name if station is not None else ""
    return fir


def propagate_station_rename(repo: Repository, station: PoliceStation) -> int:
    """Refresh station_name on every FIR filed at this station. Returns rows touched."""
    touched = 0
    for fir in repo.filter_by(FirDetail, station_id=station.id):
        if fir.station_name != station.name:
            fir.station_name = station.name
            repo.save(fir)
            touched += 1
    if touched:
        logger.info(f"Refreshed station name on {touched} FIR(s) for station {station.id}")
    return touched


def recount_officers(repo: Repository) -> int:
    """Recompute officer_count for every station from the officers table. Returns stations corrected."""
    corrected = 0
    for station in repo.list(PoliceStation):
        actual = repo.count(Officer, station_id=station.id)
        if station.officer_count != actual:
            station.officer_count = actual
            repo.save(station)
            corrected += 1
    if corrected:
        logger.warning(f"Officer counts corrected on {corrected} station(s)")
    return corrected
