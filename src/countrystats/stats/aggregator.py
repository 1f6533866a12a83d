"""Latest-per-country reduction of the estimate histories."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, TypeVar

from countrystats.stats.models import (
    CountryRecord,
    ProgrammerEstimate,
    SpeakerEstimate,
    StatsRow,
    TimestampedEstimate,
)
from countrystats.utils.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=TimestampedEstimate)


def latest(estimates: Iterable[E]) -> Optional[E]:
    """
    Pick the most recent estimate.

    Most recent means the greatest created_date; on equal timestamps the
    greatest estimate_id wins.

    Returns:
        The winning estimate, or None for an empty history
    """
    winner: Optional[E] = None
    for estimate in estimates:
        if winner is None or estimate.recency_key > winner.recency_key:
            winner = estimate
    return winner


def latest_by_country(estimates: Iterable[E]) -> Dict[int, E]:
    """Group estimates by country_id and reduce each group with latest()."""
    groups: Dict[int, List[E]] = defaultdict(list)
    for estimate in estimates:
        groups[estimate.country_id].append(estimate)
    return {country_id: latest(group) for country_id, group in groups.items()}


def country_order_key(country: CountryRecord) -> tuple[str, str, int]:
    """Name order: case-folded name, then exact name, then id for duplicates."""
    return (country.country_name.casefold(), country.country_name, country.country_id)


def aggregate(
    countries: Iterable[CountryRecord],
    speaker_estimates: Iterable[SpeakerEstimate],
    programmer_estimates: Iterable[ProgrammerEstimate],
) -> List[StatsRow]:
    """
    Join the latest speaker and programmer estimate onto every country.

    Args:
        countries: Country reference rows (any order)
        speaker_estimates: Full english speaker estimate history (any order)
        programmer_estimates: Full programmer estimate history (any order)

    Returns:
        One StatsRow per country, ordered by country name, with rank set to
        the 1-based position in that order
    """
    latest_speakers = latest_by_country(speaker_estimates)
    latest_programmers = latest_by_country(programmer_estimates)

    rows: List[StatsRow] = []
    for rank, country in enumerate(sorted(countries, key=country_order_key), start=1):
        es = latest_speakers.get(country.country_id)
        pg = latest_programmers.get(country.country_id)
        rows.append(
            StatsRow(
                rank=rank,
                country_name=country.country_name,
                population=country.population,
                one_pct_population=country.one_pct_population,
                estimated_count=es.estimated_count if es else None,
                pct_of_population=es.pct_of_population if es else None,
                source=es.source if es else None,
                conservative_est=pg.conservative_est if pg else None,
                mid_est=pg.mid_est if pg else None,
                high_est=pg.high_est if pg else None,
                pct_conservative=pg.pct_conservative if pg else None,
                pct_mid=pg.pct_mid if pg else None,
                pct_high=pg.pct_high if pg else None,
                es_created=es.created_date if es else None,
                pg_created=pg.created_date if pg else None,
            )
        )

    logger.debug(
        f"Aggregated {len(rows)} countries "
        f"({len(latest_speakers)} with speaker data, {len(latest_programmers)} with programmer data)"
    )
    return rows
