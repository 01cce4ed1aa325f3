"""
CRMS - Test Configuration and Fixtures
"""
import os
import tempfile
from datetime import date

import pytest

# Set testing environment before the app reads config
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['RATE_LIMIT_PER_MINUTE'] = '0'
os.environ['RATE_LIMIT_PER_HOUR'] = '0'
os.environ['SEED_ON_STARTUP'] = 'false'
os.environ['DEFAULT_ADMIN_EMAIL'] = ''
os.environ['DEFAULT_ADMIN_USERNAME'] = ''
os.environ['DEFAULT_ADMIN_PASSWORD'] = ''
os.environ['LOG_FILE'] = os.path.join(tempfile.gettempdir(), 'crms-test', 'crms.log')

from fastapi.testclient import TestClient

from app import app
from auth.dependencies import get_repository
from auth.security import get_password_hash, create_access_token
from database.connection import Database
from database.models import User, UserRole, CriminalStatus
from database.repository import MemoryRepository, SqlRepository
from services.station_service import StationService
from services.officer_service import OfficerService
from services.criminal_service import CriminalService
from services.fir_service import FirService

TEST_PASSWORD = 'Secret#123'
# bcrypt is deliberately slow; hash once for every fixture user
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def memory_repo():
    return MemoryRepository()


@pytest.fixture
def sql_repo():
    """SQLite in-memory database, fresh per test."""
    database = Database('sqlite://')
    database.create_tables()
    session = database.SessionLocal()
    yield SqlRepository(session)
    session.close()
    database.engine.dispose()


@pytest.fixture(params=['memory', 'sql'])
def repo(request):
    """Run the test against both storage backends."""
    return request.getfixturevalue(f'{request.param}_repo')


class Factory:
    """Builds valid records through the services."""

    def __init__(self, repo):
        self.repo = repo
        self._badges = 0

    def user(self, role=UserRole.USER, username=None, **overrides):
        username = username or f'{role.value}-user'
        values = dict(
            email=f'{username}@crms.test',
            username=username,
            first_name=username.split('-')[0].capitalize(),
            last_name='Tester',
            role=role,
            hashed_password=TEST_PASSWORD_HASH,
            is_active=True,
        )
        values.update(overrides)
        return self.repo.add(User(**values))

    def station(self, name='Central Police Station', **overrides):
        data = {'name': name, 'address': '12 Main St', 'contact': '+1-555-0100'}
        data.update(overrides)
        return StationService.create(self.repo, data)

    def officer(self, station_id, name='Asha Rao', **overrides):
        self._badges += 1
        data = {
            'name': name,
            'badge_number': f'B-{self._badges:04d}',
            'rank': 'Inspector',
            'station_id': station_id,
        }
        data.update(overrides)
        return OfficerService.create(self.repo, data)

    def criminal(self, first_name='John', last_name='Doe', **overrides):
        data = {
            'first_name': first_name,
            'last_name': last_name,
            'age': 34,
            'gender': 'Male',
            'status': CriminalStatus.ACTIVE,
            'last_crime_date': date(2024, 3, 1),
            'crime_types': ['Theft'],
        }
        data.update(overrides)
        return CriminalService.create(self.repo, data)

    def fir(self, station_id, **overrides):
        data = {
            'complainant_name': 'Mary Major',
            'complainant_id': 'ID-100200',
            'date_filed': date(2024, 5, 10),
            'incident_type': 'Theft',
            'station_id': station_id,
        }
        data.update(overrides)
        return FirService.create(self.repo, data)


@pytest.fixture
def make(repo):
    return Factory(repo)


# ============================================================================
# API fixtures (memory backend)
# ============================================================================

@pytest.fixture
def api_repo():
    return MemoryRepository()


@pytest.fixture
def api_make(api_repo):
    return Factory(api_repo)


@pytest.fixture
def client(api_repo):
    """Test client whose routes read and write api_repo."""
    app.dependency_overrides[get_repository] = lambda: api_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(user):
    token = create_access_token({'sub': user.id, 'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(api_make):
    return bearer(api_make.user(UserRole.ADMIN, username='admin-user'))


@pytest.fixture
def officer_headers(api_make):
    return bearer(api_make.user(UserRole.OFFICER, username='officer-user'))


@pytest.fixture
def user_headers(api_make):
    return bearer(api_make.user(UserRole.USER, username='viewer-user'))


@pytest.fixture
def headers_for():
    """Bearer headers for an arbitrary user."""
    return bearer
