"""Repository functions for country and estimate history reads."""

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from countrystats.database.schema import Country, EnglishSpeaker, Programmer
from countrystats.database.sqlite_client import session_context
from countrystats.errors import DataSourceUnavailable
from countrystats.stats.aggregator import aggregate
from countrystats.stats.models import (
    CountryRecord,
    ProgrammerEstimate,
    SpeakerEstimate,
    StatsRow,
)
from countrystats.utils.logging import get_logger

logger = get_logger(__name__)


def list_countries(session: Session) -> List[CountryRecord]:
    """Get all countries (unordered; the aggregator owns ordering)."""
    return [
        CountryRecord(
            country_id=row.country_id,
            country_name=row.country_name,
            population=row.population,
            one_pct_population=row.one_pct_population,
        )
        for row in session.query(Country).all()
    ]


def list_speaker_estimates(session: Session) -> List[SpeakerEstimate]:
    """Get the full english speaker estimate history."""
    return [
        SpeakerEstimate(
            estimate_id=row.english_id,
            country_id=row.country_id,
            created_date=row.created_date,
            estimated_count=row.estimated_count,
            pct_of_population=row.pct_of_population,
            source=row.source,
        )
        for row in session.query(EnglishSpeaker).all()
    ]


def list_programmer_estimates(session: Session) -> List[ProgrammerEstimate]:
    """Get the full programmer estimate history."""
    return [
        ProgrammerEstimate(
            estimate_id=row.programmer_id,
            country_id=row.country_id,
            created_date=row.created_date,
            conservative_est=row.conservative_est,
            mid_est=row.mid_est,
            high_est=row.high_est,
            pct_conservative=row.pct_conservative,
            pct_mid=row.pct_mid,
            pct_high=row.pct_high,
        )
        for row in session.query(Programmer).all()
    ]


def fetch_stats_rows(session: Session) -> List[StatsRow]:
    """
    Load countries and both estimate histories and reduce them to StatsRows.

    Args:
        session: SQLAlchemy session

    Returns:
        One StatsRow per country in country-name order

    Raises:
        DataSourceUnavailable: If any of the three reads fails
    """
    try:
        countries = list_countries(session)
        speakers = list_speaker_estimates(session)
        programmers = list_programmer_estimates(session)
    except SQLAlchemyError as e:
        logger.error(f"Country stats query failed: {e}", exc_info=True)
        raise DataSourceUnavailable("Query failed") from e

    logger.info(
        f"Loaded {len(countries)} countries, {len(speakers)} speaker estimates, "
        f"{len(programmers)} programmer estimates"
    )
    return aggregate(countries, speakers, programmers)


def load_stats_rows(sqlite_path: str) -> List[StatsRow]:
    """
    Scoped checkout + fetch_stats_rows for one request.

    The session (and its pooled connection) is released even when the
    query fails.

    Raises:
        DataSourceUnavailable: If the database cannot be opened or queried
    """
    try:
        with session_context(sqlite_path) as session:
            return fetch_stats_rows(session)
    except SQLAlchemyError as e:
        logger.error(f"Cannot open database {sqlite_path}: {e}", exc_info=True)
        raise DataSourceUnavailable("Query failed") from e
