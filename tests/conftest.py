"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from countrystats.database.schema import Base, Country, EnglishSpeaker, Programmer


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_session(session):
    """Session with three countries; Canada has no programmer history."""
    session.add_all([
        Country(country_id=1, country_name="India", population=1428627663, one_pct_population=14286277),
        Country(country_id=2, country_name="Brazil", population=210000000, one_pct_population=2100000),
        Country(country_id=3, country_name="Canada", population=38000000, one_pct_population=380000),
        EnglishSpeaker(english_id=5, country_id=1, estimated_count=125000000, pct_of_population=0.0875,
                       source="Census", created_date=datetime(2023, 1, 1)),
        EnglishSpeaker(english_id=7, country_id=1, estimated_count=129000000, pct_of_population=0.0903,
                       source="Census, projected", created_date=datetime(2023, 1, 1)),
        EnglishSpeaker(english_id=2, country_id=2, estimated_count=3150000, pct_of_population=0.015,
                       source="EF EPI", created_date=datetime(2023, 6, 1)),
        EnglishSpeaker(english_id=3, country_id=3, estimated_count=33000000, pct_of_population=1.2,
                       source="StatCan", created_date=datetime(2023, 3, 10)),
        Programmer(programmer_id=1, country_id=1, conservative_est=4300000, mid_est=5200000, high_est=5800000,
                   pct_conservative=0.003, pct_mid=0.0036, pct_high=0.0041, created_date=datetime(2024, 1, 10)),
        Programmer(programmer_id=2, country_id=2, conservative_est=500000, mid_est=630000, high_est=750000,
                   pct_conservative=0.0023, pct_mid=0.0029, pct_high=0.0035, created_date=datetime(2023, 9, 1)),
    ])
    session.commit()
    return session


@pytest.fixture
def sample_rows():
    """Wire records as served by /api/country-stats."""
    return [
        {
            "No.": 1, "Country Name": "Brazil", "Population": 210000000, "1% Population": 2100000,
            "Est. Count": 3150000, "% of Population": 0.015, "Source": "EF EPI",
            "Conservative Est.": 500000, "Mid Est.": 630000, "High Est.": 750000,
            "% Conservative": 0.0023, "% Mid": 0.0029, "% High": 0.0035,
            "es_created": "2023-06-01T00:00:00Z", "pg_created": "2023-09-01T00:00:00Z",
        },
        {
            "No.": 2, "Country Name": "Canada", "Population": 38000000, "1% Population": 380000,
            "Est. Count": 33000000, "% of Population": 1.2, "Source": "Statistics Canada",
            "Conservative Est.": None, "Mid Est.": None, "High Est.": None,
            "% Conservative": None, "% Mid": None, "% High": None,
            "es_created": "2023-03-10T00:00:00Z", "pg_created": None,
        },
        {
            "No.": 3, "Country Name": "Finland", "Population": 5545475, "1% Population": 55455,
            "Est. Count": 3950000, "% of Population": 0.712, "Source": "Eurobarometer",
            "Conservative Est.": None, "Mid Est.": None, "High Est.": None,
            "% Conservative": None, "% Mid": None, "% High": None,
            "es_created": "2023-01-01T00:00:00Z", "pg_created": None,
        },
        {
            "No.": 4, "Country Name": "India", "Population": 1428627663, "1% Population": 14286277,
            "Est. Count": 129000000, "% of Population": 0.0903, "Source": "Census 2011, projected",
            "Conservative Est.": 4300000, "Mid Est.": 5200000, "High Est.": 5800000,
            "% Conservative": 0.003, "% Mid": 0.0036, "% High": 0.0041,
            "es_created": "2024-02-01T00:00:00Z", "pg_created": "2024-01-10T00:00:00Z",
        },
    ]
