"""
Dashboard aggregates: headline counts and chart series computed from stored records.
"""
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from database.models import PoliceStation, Officer, Criminal, FirDetail, FirStatus
from database.repository import Repository
import config

TREND_MONTHS = 12


def _series(counter: Counter) -> Dict[str, List[Any]]:
    """Chart series ordered by count descending, then label."""
    ordered = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return {
        "labels": [label for label, _ in ordered],
        "data": [count for _, count in ordered],
    }


def _month_starts(as_of: date, months: int) -> List[date]:
    """First day of each of the trailing months, oldest first, ending with as_of's month."""
    year, month = as_of.year, as_of.month
    starts = []
    for _ in range(months):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, FirStatus) else str(status)


class DashboardService:
    """Service for dashboard statistics and charts."""

    @staticmethod
    def stats(repo: Repository) -> Dict[str, Any]:
        """
        Headline counts.

        activeCases counts FIRs whose status is new or investigating;
        totalCrimes counts crime-type tags attributed across criminal records.
        """
        firs = repo.list(FirDetail)
        criminals = repo.list(Criminal)

        breakdown = {status.value: 0 for status in FirStatus}
        for fir in firs:
            breakdown[_status_value(fir.status)] = breakdown.get(_status_value(fir.status), 0) + 1

        return {
            "totalStations": repo.count(PoliceStation),
            "totalOfficers": repo.count(Officer),
            "criminalRecords": len(criminals),
            "firReports": len(firs),
            "activeCases": sum(breakdown.get(s, 0) for s in config.ACTIVE_CASE_STATUSES),
            "totalCrimes": sum(len(c.crime_types or []) for c in criminals),
            "firStatusBreakdown": breakdown,
        }

    @staticmethod
    def crime_type_distribution(criminals: Iterable[Criminal]) -> Dict[str, List[Any]]:
        counter = Counter(tag for c in criminals for tag in (c.crime_types or []))
        return _series(counter)

    @staticmethod
    def incident_type_distribution(firs: Iterable[FirDetail]) -> Dict[str, List[Any]]:
        return _series(Counter(fir.incident_type for fir in firs))

    @staticmethod
    def monthly_trends(firs: Iterable[FirDetail], as_of: date, months: int = TREND_MONTHS) -> Dict[str, List[Any]]:
        """FIRs filed per calendar month over the trailing window ending at as_of."""
        starts = _month_starts(as_of, months)
        counts = {(d.year, d.month): 0 for d in starts}
        for fir in firs:
            filed = fir.date_filed
            if filed is None or filed > as_of:
                continue
            key = (filed.year, filed.month)
            if key in counts:
                counts[key] += 1
        return {
            "labels": [d.strftime("%b %Y") for d in starts],
            "data": [counts[(d.year, d.month)] for d in starts],
        }

    @staticmethod
    def chart_data(repo: Repository, as_of: Optional[date] = None) -> Dict[str, Any]:
        as_of = as_of or date.today()
        firs = repo.list(FirDetail)
        return {
            "crimeTypeDistribution": DashboardService.crime_type_distribution(repo.list(Criminal)),
            "monthlyCrimeTrends": DashboardService.monthly_trends(firs, as_of),
            "incidentTypeDistribution": DashboardService.incident_type_distribution(firs),
        }
