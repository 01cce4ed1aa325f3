"""
End-to-end API tests through the real lifespan: SQLite engine, bootstrap
admin and one database session per request.
"""
import pytest
from fastapi.testclient import TestClient

import config
from app import app

ADMIN_PASSWORD = 'Root#1234'


@pytest.fixture
def live_client(monkeypatch):
    monkeypatch.setattr(config, 'DATABASE_URL', 'sqlite://')
    monkeypatch.setattr(config, 'DEFAULT_ADMIN_EMAIL', 'root@crms.test')
    monkeypatch.setattr(config, 'DEFAULT_ADMIN_USERNAME', 'root')
    monkeypatch.setattr(config, 'DEFAULT_ADMIN_PASSWORD', ADMIN_PASSWORD)
    monkeypatch.setattr(config, 'SEED_ON_STARTUP', False)
    monkeypatch.setattr(config, 'db', None)
    app.dependency_overrides.clear()

    with TestClient(app) as client:
        yield client


@pytest.fixture
def root_headers(live_client):
    response = live_client.post('/api/auth/login', json={'username': 'root', 'password': ADMIN_PASSWORD})
    assert response.status_code == 200
    return {'Authorization': f"Bearer {response.json()['accessToken']}"}


class TestDatabaseBackedApi:

    def test_health(self, live_client):
        body = live_client.get('/health').json()
        assert body['status'] == 'healthy'
        assert body['checks']['database'] == {'status': 'ok'}

    def test_bootstrap_admin_can_sign_in(self, live_client, root_headers):
        me = live_client.get('/api/auth/user', headers=root_headers)
        assert me.status_code == 200
        assert me.json()['role'] == 'admin'

    def test_writes_are_committed_per_request(self, live_client, root_headers):
        station = live_client.post('/api/police-stations', json={
            'name': 'Harbour', 'address': '1 Dock Rd', 'contact': '100',
        }, headers=root_headers).json()
        officer = {'name': 'Asha Rao', 'badgeNumber': 'B-1', 'rank': 'Inspector', 'stationId': station['id']}
        assert live_client.post('/api/officers', json=officer, headers=root_headers).status_code == 201

        fetched = live_client.get(f"/api/police-stations/{station['id']}", headers=root_headers).json()
        assert fetched['officerCount'] == 1

        duplicate = dict(officer, name='Other')
        assert live_client.post('/api/officers', json=duplicate, headers=root_headers).status_code == 409

        fetched = live_client.get(f"/api/police-stations/{station['id']}", headers=root_headers).json()
        assert fetched['officerCount'] == 1
        officers = live_client.get(f"/api/police-stations/{station['id']}/officers", headers=root_headers).json()
        assert [o['badgeNumber'] for o in officers] == ['B-1']

    def test_table_page_size_is_fixed(self, live_client, root_headers):
        for i in range(12):
            live_client.post('/api/police-stations', json={
                'name': f'Station {i:02d}', 'address': 'Main St', 'contact': '100',
            }, headers=root_headers)

        page = live_client.get('/api/police-stations/table', params={'pageSize': 50},
                               headers=root_headers).json()
        assert page['total'] == 12
        assert len(page['data']) == 10
