#!/usr/bin/env python3
"""
Populate the database with demo stations, officers, criminals and FIRs.

Usage:
    python scripts/seed_database.py [--clear] [--seed 42] [--stations 20] ...
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to the system path
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.connection import Database
from database.repository import SqlRepository
from services.seed_service import SeedService, SeedCounts
import config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Seed the crime record database with demo data")
    parser.add_argument("--clear", action="store_true", help="Delete existing records first")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    parser.add_argument("--stations", type=int, default=config.SEED_STATIONS)
    parser.add_argument("--officers", type=int, default=config.SEED_OFFICERS)
    parser.add_argument("--criminals", type=int, default=config.SEED_CRIMINALS)
    parser.add_argument("--firs", type=int, default=config.SEED_FIR_DETAILS)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config.db = Database(
        database_url=config.DATABASE_URL,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW
    )
    config.db.create_tables()

    with config.db.get_session() as session:
        created = SeedService.seed(
            SqlRepository(session),
            counts=SeedCounts(
                stations=args.stations,
                officers=args.officers,
                criminals=args.criminals,
                fir_details=args.firs,
            ),
            rng_seed=args.seed,
            clear=args.clear,
        )

    print("Seeding complete:")
    for kind, count in created.items():
        print(f"  {kind}: {count}")


if __name__ == "__main__":
    main()
