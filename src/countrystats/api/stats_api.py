"""Stats API: the row source behind the country-stats endpoint."""

from typing import Any, Dict, Iterable, List

from ..database.country_repo import load_stats_rows
from ..stats.models import StatsRow


class StatsRowSource:
    """Data-access collaborator: one scoped database checkout per call."""

    def __init__(self, sqlite_path: str):
        self.sqlite_path = sqlite_path

    def __call__(self) -> List[StatsRow]:
        return load_stats_rows(self.sqlite_path)


def to_records(rows: Iterable[StatsRow]) -> List[Dict[str, Any]]:
    """Wire records keyed by column label, in catalog order."""
    return [row.to_record() for row in rows]


def get_country_stats(sqlite_path: str) -> List[Dict[str, Any]]:
    """
    Get all country stats rows as wire records.

    Args:
        sqlite_path: Database file

    Returns:
        Records in country-name order

    Raises:
        DataSourceUnavailable: If the database cannot be read
    """
    return to_records(StatsRowSource(sqlite_path)())
