"""
Demo data generator.

Everything is created through the entity services, so officer counts, FIR
station names and the activity log are exactly what real usage would produce.
"""
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional

from database.models import (
    PoliceStation, Officer, Criminal, FirDetail, Activity, CriminalStatus, FirStatus
)
from database.repository import Repository
from core.logger import logger
from services.station_service import StationService
from services.officer_service import OfficerService
from services.criminal_service import CriminalService
from services.fir_service import FirService
import config

FIRST_NAMES = [
    'John', 'Jane', 'Michael', 'Sarah', 'David', 'Emily', 'Robert', 'Lisa',
    'William', 'Emma', 'James', 'Olivia', 'Richard', 'Sophia', 'Thomas', 'Ava',
    'Charles', 'Mia', 'Daniel', 'Isabella', 'Matthew', 'Charlotte', 'Anthony', 'Amelia',
    'Mark', 'Harper', 'Paul', 'Evelyn', 'Steven', 'Abigail', 'Andrew', 'Elizabeth',
]
LAST_NAMES = [
    'Smith', 'Johnson', 'Williams', 'Jones', 'Brown', 'Davis', 'Miller', 'Wilson',
    'Moore', 'Taylor', 'Anderson', 'Thomas', 'Jackson', 'White', 'Harris', 'Martin',
    'Thompson', 'Garcia', 'Martinez', 'Robinson', 'Clark', 'Rodriguez', 'Lewis', 'Lee',
]
STREETS = ['Main St', 'Oak Ave', 'Maple Dr', 'Cedar Ln', 'Pine Rd', 'Elm St', 'Washington Ave', 'Park Pl']
CITIES = ['New York', 'Los Angeles', 'Chicago', 'Houston', 'Phoenix', 'Philadelphia', 'San Antonio', 'San Diego']
STATES = ['NY', 'CA', 'IL', 'TX', 'AZ', 'PA', 'FL', 'GA']
RANKS = ['Constable', 'Sergeant', 'Inspector', 'Deputy Commissioner', 'Assistant Commissioner', 'Commissioner']
CRIME_TYPES = [
    'Theft', 'Robbery', 'Assault', 'Homicide', 'Fraud',
    'Cybercrime', 'Drug Possession', 'Drug Trafficking',
    'Kidnapping', 'Domestic Violence', 'Vandalism',
    'White Collar Crime', 'Organized Crime', 'Arson', 'Identity Theft',
]
GENDERS = ['Male', 'Female', 'Other']


@dataclass
class SeedCounts:
    stations: int = config.SEED_STATIONS
    officers: int = config.SEED_OFFICERS
    criminals: int = config.SEED_CRIMINALS
    fir_details: int = config.SEED_FIR_DETAILS


class _Faker:
    """Random demo values from a seeded generator."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    def name(self):
        return self.rng.choice(FIRST_NAMES), self.rng.choice(LAST_NAMES)

    def phone(self) -> str:
        r = self.rng
        return f"+1-{r.randint(100, 999)}-{r.randint(100, 999)}-{r.randint(1000, 9999)}"

    def address(self) -> str:
        r = self.rng
        return (
            f"{r.randint(1000, 9999)} {r.choice(STREETS)}, {r.choice(CITIES)}, "
            f"{r.choice(STATES)} {r.randint(10000, 99999)}"
        )

    def past_date(self, today: date, max_days: int) -> date:
        return today - timedelta(days=self.rng.randint(0, max_days))


class SeedService:
    """Service for populating the store with demo data."""

    @staticmethod
    def status(repo: Repository) -> Dict[str, object]:
        counts = {
            "stations": repo.count(PoliceStation),
            "officers": repo.count(Officer),
            "criminals": repo.count(Criminal),
            "firDetails": repo.count(FirDetail),
            "activities": repo.count(Activity),
        }
        return {"seeded": counts["stations"] > 0, "counts": counts}

    @staticmethod
    def clear(repo: Repository) -> None:
        """Delete all demo-managed records, dependents first. No activities are logged."""
        with repo.transaction():
            for model in (FirDetail, Officer, Criminal, PoliceStation, Activity):
                for record in repo.list(model):
                    repo.delete(record)
        logger.warning("Seed data cleared")

    @staticmethod
    def seed(
        repo: Repository,
        counts: Optional[SeedCounts] = None,
        rng_seed: Optional[int] = None,
        clear: bool = False,
        today: Optional[date] = None
    ) -> Dict[str, int]:
        """
        Create stations, then officers and FIRs spread over them, then criminals.

        Args:
            repo: Repository
            counts: How many of each kind to create
            rng_seed: Seed for reproducible data
            clear: Remove existing records first
            today: Reference date for generated dates

        Returns:
            Number of records created per kind
        """
        counts = counts or SeedCounts()
        faker = _Faker(random.Random(rng_seed))
        today = today or date.today()

        if clear:
            SeedService.clear(repo)

        logger.info(
            f"Seeding {counts.stations} stations, {counts.officers} officers, "
            f"{counts.criminals} criminals, {counts.fir_details} FIRs"
        )

        stations = []
        for _ in range(counts.stations):
            stations.append(StationService.create(repo, {
                "name": f"{faker.rng.choice(CITIES)} Police Station",
                "address": faker.address(),
                "contact": faker.phone(),
            }))

        created_officers = 0
        if stations:
            taken = {o.badge_number for o in repo.list(Officer)}
            for _ in range(counts.officers):
                badge = str(faker.rng.randint(100000, 999999))
                while badge in taken:
                    badge = str(faker.rng.randint(100000, 999999))
                taken.add(badge)
                first, last = faker.name()
                OfficerService.create(repo, {
                    "name": f"{first} {last}",
                    "badge_number": badge,
                    "rank": faker.rng.choice(RANKS),
                    "station_id": faker.rng.choice(stations).id,
                })
                created_officers += 1

        for _ in range(counts.criminals):
            first, last = faker.name()
            CriminalService.create(repo, {
                "first_name": first,
                "last_name": last,
                "age": faker.rng.randint(18, 70),
                "gender": faker.rng.choice(GENDERS),
                "status": faker.rng.choice(list(CriminalStatus)),
                "last_crime_date": faker.past_date(today, 5 * 365),
                "crime_types": faker.rng.sample(CRIME_TYPES, faker.rng.randint(1, 3)),
            })

        created_firs = 0
        if stations:
            for _ in range(counts.fir_details):
                first, last = faker.name()
                FirService.create(repo, {
                    "complainant_name": f"{first} {last}",
                    "complainant_id": f"ID-{faker.rng.randint(100000, 999999)}",
                    "date_filed": faker.past_date(today, 365),
                    "incident_type": faker.rng.choice(CRIME_TYPES),
                    "station_id": faker.rng.choice(stations).id,
                    "status": faker.rng.choice(list(FirStatus)),
                })
                created_firs += 1

        result = {
            "stations": len(stations),
            "officers": created_officers,
            "criminals": counts.criminals,
            "firDetails": created_firs,
        }
        logger.info(f"Seeding complete: {result}")
        return result
