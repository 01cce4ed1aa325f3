"""Generate human-readable record ids ({PREFIX}-{year}-{seq})."""
from datetime import date
from typing import Optional

from database.repository import Repository

STATION_PREFIX = "PS"
OFFICER_PREFIX = "OFF"
CRIMINAL_PREFIX = "CRIM"
FIR_PREFIX = "FIR"


def generate_record_id(repo: Repository, model, prefix: str, year: Optional[int] = None) -> str:
    """Next free id for the model, e.g. PS-2024-0042. Sequences restart every year."""
    year = year or date.today().year
    stem = f"{prefix}-{year}-"
    max_n = 0
    for record in repo.list(model):
        rid = record.id or ""
        if rid.startswith(stem):
            try:
                max_n = max(max_n, int(rid[len(stem):]))
            except ValueError:
                pass
    candidate = f"{stem}{max_n + 1:04d}"
    # Hand-entered ids may sit anywhere in the sequence
    while repo.get(model, candidate) is not None:
        max_n += 1
        candidate = f"{stem}{max_n + 1:04d}"
    return candidate
