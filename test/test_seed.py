"""
Demo data seeding tests.
"""
from datetime import date

from database.models import FirDetail, Officer, PoliceStation
from services.dashboard_service import DashboardService
from services.derived_fields import recount_officers
from services.seed_service import SeedCounts, SeedService

SMALL = SeedCounts(stations=3, officers=8, criminals=5, fir_details=6)


def test_status_of_empty_store(repo):
    status = SeedService.status(repo)
    assert status['seeded'] is False
    assert status['counts'] == {'stations': 0, 'officers': 0, 'criminals': 0, 'firDetails': 0, 'activities': 0}


def test_seed_creates_requested_counts(repo):
    created = SeedService.seed(repo, counts=SMALL, rng_seed=42, today=date(2024, 6, 30))
    assert created == {'stations': 3, 'officers': 8, 'criminals': 5, 'firDetails': 6}

    status = SeedService.status(repo)
    assert status['seeded'] is True
    assert status['counts']['activities'] == 3 + 8 + 5 + 6


def test_seeded_data_respects_derived_fields(repo):
    SeedService.seed(repo, counts=SMALL, rng_seed=7, today=date(2024, 6, 30))

    assert recount_officers(repo) == 0
    names = {s.id: s.name for s in repo.list(PoliceStation)}
    for fir in repo.list(FirDetail):
        assert fir.station_name == names[fir.station_id]
        assert fir.date_filed <= date(2024, 6, 30)

    badges = [o.badge_number for o in repo.list(Officer)]
    assert len(badges) == len(set(badges))


def test_same_seed_same_data(memory_repo, sql_repo):
    SeedService.seed(memory_repo, counts=SMALL, rng_seed=11, today=date(2024, 6, 30))
    SeedService.seed(sql_repo, counts=SMALL, rng_seed=11, today=date(2024, 6, 30))
    assert DashboardService.stats(memory_repo) == DashboardService.stats(sql_repo)
    assert [o.badge_number for o in memory_repo.list(Officer)] == [o.badge_number for o in sql_repo.list(Officer)]


def test_officers_and_firs_need_stations(repo):
    created = SeedService.seed(repo, counts=SeedCounts(stations=0, officers=5, criminals=2, fir_details=5), rng_seed=1)
    assert created == {'stations': 0, 'officers': 0, 'criminals': 2, 'firDetails': 0}


def test_clear_then_reseed(repo, make):
    make.station(name='Manual')
    SeedService.seed(repo, counts=SMALL, rng_seed=3, clear=True, today=date(2024, 6, 30))
    counts = SeedService.status(repo)['counts']
    assert counts['stations'] == 3
    assert counts['activities'] == 3 + 8 + 5 + 6

    SeedService.clear(repo)
    assert SeedService.status(repo)['counts'] == {
        'stations': 0, 'officers': 0, 'criminals': 0, 'firDetails': 0, 'activities': 0,
    }
