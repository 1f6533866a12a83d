from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Country(Base):
    __tablename__ = "countries"

    country_id = Column(Integer, primary_key=True)
    country_name = Column(String, nullable=False, index=True)
    population = Column(BigInteger, nullable=True)
    one_pct_population = Column(BigInteger, nullable=True)


class EnglishSpeaker(Base):
    """Append-only history of english speaker estimates per country."""
    __tablename__ = "english_speakers"

    english_id = Column(Integer, primary_key=True)
    country_id = Column(Integer, ForeignKey("countries.country_id"), nullable=False)
    estimated_count = Column(BigInteger, nullable=True)
    pct_of_population = Column(Float, nullable=True)  # fraction (0..1) or percentage
    source = Column(String, nullable=True)
    created_date = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_english_speakers_country_created', 'country_id', 'created_date'),
    )


class Programmer(Base):
    """Append-only history of programmer estimates per country."""
    __tablename__ = "programmers"

    programmer_id = Column(Integer, primary_key=True)
    country_id = Column(Integer, ForeignKey("countries.country_id"), nullable=False)
    conservative_est = Column(BigInteger, nullable=True)
    mid_est = Column(BigInteger, nullable=True)
    high_est = Column(BigInteger, nullable=True)
    pct_conservative = Column(Float, nullable=True)
    pct_mid = Column(Float, nullable=True)
    pct_high = Column(Float, nullable=True)
    created_date = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_programmers_country_created', 'country_id', 'created_date'),
    )
