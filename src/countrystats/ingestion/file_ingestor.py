import csv
from pathlib import Path
from typing import Dict, Optional

from sqlalchemy.orm import Session

from ..database.schema import Country, EnglishSpeaker, Programmer
from ..utils.logging import get_logger
from ..utils.time import parse_timestamp

logger = get_logger(__name__)


def _int_or_none(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(float(value.strip()))


def _float_or_none(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value.strip())


def _created(value: Optional[str]):
    # SQLite DateTime columns hold naive values; store UTC
    return parse_timestamp(value).replace(tzinfo=None)


def load_countries_from_csv(csv_path: Path, session: Session) -> int:
    """
    Load countries from CSV and merge into database.

    Expected CSV columns: country_id, country_name, population, one_pct_population
    (one_pct_population is derived from population when blank)
    """
    if not csv_path.exists():
        logger.warning(f"CSV file not found: {csv_path}")
        return 0

    count = 0
    with csv_path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            population = _int_or_none(row.get("population"))
            one_pct = _int_or_none(row.get("one_pct_population"))
            if one_pct is None and population is not None:
                one_pct = round(population / 100)
            country = Country(
                country_id=int(row["country_id"]),
                country_name=row.get("country_name", "").strip(),
                population=population,
                one_pct_population=one_pct,
            )
            session.merge(country)
            count += 1

    session.commit()
    logger.info(f"Loaded {count} countries from {csv_path}")
    return count


def load_speakers_from_csv(csv_path: Path, session: Session) -> int:
    """
    Load english speaker estimates from CSV and merge into database.

    Expected CSV columns: english_id, country_id, estimated_count, pct_of_population, source, created_date
    """
    if not csv_path.exists():
        logger.warning(f"CSV file not found: {csv_path}")
        return 0

    count = 0
    with csv_path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            estimate = EnglishSpeaker(
                english_id=int(row["english_id"]),
                country_id=int(row["country_id"]),
                estimated_count=_int_or_none(row.get("estimated_count")),
                pct_of_population=_float_or_none(row.get("pct_of_population")),
                source=(row.get("source") or "").strip() or None,
                created_date=_created(row.get("created_date")),
            )
            session.merge(estimate)
            count += 1

    session.commit()
    logger.info(f"Loaded {count} english speaker estimates from {csv_path}")
    return count


def load_programmers_from_csv(csv_path: Path, session: Session) -> int:
    """
    Load programmer estimates from CSV and merge into database.

    Expected CSV columns: programmer_id, country_id, conservative_est, mid_est, high_est,
    pct_conservative, pct_mid, pct_high, created_date
    """
    if not csv_path.exists():
        logger.warning(f"CSV file not found: {csv_path}")
        return 0

    count = 0
    with csv_path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            estimate = Programmer(
                programmer_id=int(row["programmer_id"]),
                country_id=int(row["country_id"]),
                conservative_est=_int_or_none(row.get("conservative_est")),
                mid_est=_int_or_none(row.get("mid_est")),
                high_est=_int_or_none(row.get("high_est")),
                pct_conservative=_float_or_none(row.get("pct_conservative")),
                pct_mid=_float_or_none(row.get("pct_mid")),
                pct_high=_float_or_none(row.get("pct_high")),
                created_date=_created(row.get("created_date")),
            )
            session.merge(estimate)
            count += 1

    session.commit()
    logger.info(f"Loaded {count} programmer estimates from {csv_path}")
    return count


def ingest_all_csvs(
    countries_path: Path,
    speakers_path: Path,
    programmers_path: Path,
    session: Session,
) -> Dict[str, int]:
    """
    Load all three CSV files into the database.

    Returns a dict with counts: {"countries": X, "english_speakers": Y, "programmers": Z}
    """
    counts = {
        "countries": load_countries_from_csv(countries_path, session),
        "english_speakers": load_speakers_from_csv(speakers_path, session),
        "programmers": load_programmers_from_csv(programmers_path, session),
    }
    return counts
