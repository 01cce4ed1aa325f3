"""
Dashboard aggregate tests.
"""
from datetime import date

from database.models import FirStatus
from services.dashboard_service import DashboardService
from services.fir_service import FirService


class TestStats:

    def test_empty_store(self, repo):
        stats = DashboardService.stats(repo)
        assert stats['totalStations'] == 0
        assert stats['totalOfficers'] == 0
        assert stats['criminalRecords'] == 0
        assert stats['firReports'] == 0
        assert stats['activeCases'] == 0
        assert stats['totalCrimes'] == 0
        assert stats['firStatusBreakdown'] == {'new': 0, 'investigating': 0, 'resolved': 0, 'closed': 0}

    def test_counts(self, repo, make):
        a = make.station(name='A')
        b = make.station(name='B')
        make.officer(a.id)
        make.officer(b.id, name='Other')
        make.criminal(crime_types=['Theft', 'Fraud'])
        make.criminal(first_name='Jane', crime_types=['Assault'])
        make.fir(a.id)
        make.fir(a.id, status='investigating')
        make.fir(b.id, status='resolved')
        make.fir(b.id, status='closed')

        stats = DashboardService.stats(repo)
        assert stats['totalStations'] == 2
        assert stats['totalOfficers'] == 2
        assert stats['criminalRecords'] == 2
        assert stats['firReports'] == 4
        assert stats['activeCases'] == 2
        assert stats['totalCrimes'] == 3
        assert stats['firStatusBreakdown'] == {'new': 1, 'investigating': 1, 'resolved': 1, 'closed': 1}

    def test_closing_a_case_reduces_active_cases(self, repo, make):
        station = make.station()
        fir = make.fir(station.id)
        assert DashboardService.stats(repo)['activeCases'] == 1
        FirService.update(repo, fir.id, {'status': FirStatus.CLOSED})
        assert DashboardService.stats(repo)['activeCases'] == 0


class TestCharts:

    def test_crime_type_distribution_orders_by_count_then_label(self, repo, make):
        make.criminal(crime_types=['Theft', 'Fraud'])
        make.criminal(first_name='Jane', crime_types=['Theft', 'Arson'])
        make.criminal(first_name='Ravi', crime_types=['Theft'])

        chart = DashboardService.chart_data(repo, as_of=date(2024, 6, 30))
        assert chart['crimeTypeDistribution'] == {
            'labels': ['Theft', 'Arson', 'Fraud'],
            'data': [3, 1, 1],
        }

    def test_incident_type_distribution(self, repo, make):
        station = make.station()
        make.fir(station.id, incident_type='Burglary')
        make.fir(station.id, incident_type='Theft')
        make.fir(station.id, incident_type='Theft')

        chart = DashboardService.chart_data(repo, as_of=date(2024, 6, 30))
        assert chart['incidentTypeDistribution'] == {'labels': ['Theft', 'Burglary'], 'data': [2, 1]}

    def test_monthly_trends_window(self, repo, make):
        station = make.station()
        make.fir(station.id, date_filed=date(2024, 6, 2))
        make.fir(station.id, date_filed=date(2024, 6, 20))
        make.fir(station.id, date_filed=date(2024, 1, 15))
        make.fir(station.id, date_filed=date(2023, 7, 1))
        make.fir(station.id, date_filed=date(2023, 6, 30))  # before the window
        make.fir(station.id, date_filed=date(2024, 7, 1))   # after as_of

        trends = DashboardService.chart_data(repo, as_of=date(2024, 6, 30))['monthlyCrimeTrends']
        assert len(trends['labels']) == 12
        assert trends['labels'][0] == 'Jul 2023'
        assert trends['labels'][-1] == 'Jun 2024'
        assert trends['data'][0] == 1
        assert trends['data'][6] == 1   # Jan 2024
        assert trends['data'][-1] == 2
        assert sum(trends['data']) == 4

    def test_monthly_trends_cross_year_boundary(self):
        trends = DashboardService.monthly_trends([], as_of=date(2024, 2, 10), months=3)
        assert trends == {'labels': ['Dec 2023', 'Jan 2024', 'Feb 2024'], 'data': [0, 0, 0]}
