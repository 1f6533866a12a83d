from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from countrystats.utils.time import ensure_utc


class CountryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    country_id: int
    country_name: str
    population: Optional[int] = None
    one_pct_population: Optional[int] = None


class TimestampedEstimate(BaseModel):
    """Common shape of the append-only per-country estimate histories.

    `estimate_id` is the local sequence id used to break created_date ties.
    """
    model_config = ConfigDict(frozen=True)

    estimate_id: int
    country_id: int
    created_date: datetime

    @field_validator("created_date")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def recency_key(self) -> tuple[datetime, int]:
        return (self.created_date, self.estimate_id)


class SpeakerEstimate(TimestampedEstimate):
    estimated_count: Optional[int] = None
    pct_of_population: Optional[float] = None
    source: Optional[str] = None


class ProgrammerEstimate(TimestampedEstimate):
    conservative_est: Optional[int] = None
    mid_est: Optional[int] = None
    high_est: Optional[int] = None
    pct_conservative: Optional[float] = None
    pct_mid: Optional[float] = None
    pct_high: Optional[float] = None


class StatsRow(BaseModel):
    """One aggregated row per country.

    Field aliases are the wire keys of the country-stats endpoint. Child
    fields are None when the country has no history for that estimate.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rank: int = Field(alias="No.")
    country_name: str = Field(alias="Country Name")
    population: Optional[int] = Field(default=None, alias="Population")
    one_pct_population: Optional[int] = Field(default=None, alias="1% Population")
    estimated_count: Optional[int] = Field(default=None, alias="Est. Count")
    pct_of_population: Optional[float] = Field(default=None, alias="% of Population")
    source: Optional[str] = Field(default=None, alias="Source")
    conservative_est: Optional[int] = Field(default=None, alias="Conservative Est.")
    mid_est: Optional[int] = Field(default=None, alias="Mid Est.")
    high_est: Optional[int] = Field(default=None, alias="High Est.")
    pct_conservative: Optional[float] = Field(default=None, alias="% Conservative")
    pct_mid: Optional[float] = Field(default=None, alias="% Mid")
    pct_high: Optional[float] = Field(default=None, alias="% High")
    es_created: Optional[datetime] = Field(default=None, alias="es_created")
    pg_created: Optional[datetime] = Field(default=None, alias="pg_created")

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict keyed by the wire labels, in column order."""
        return self.model_dump(mode="json", by_alias=True)
