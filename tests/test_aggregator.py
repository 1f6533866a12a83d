"""Tests for the latest-per-country aggregation."""

from datetime import datetime, timezone

from countrystats.stats.aggregator import aggregate, latest, latest_by_country
from countrystats.stats.models import (
    CountryRecord,
    ProgrammerEstimate,
    SpeakerEstimate,
    StatsRow,
)

WIRE_KEYS = [
    "No.", "Country Name", "Population", "1% Population", "Est. Count", "% of Population",
    "Source", "Conservative Est.", "Mid Est.", "High Est.", "% Conservative", "% Mid",
    "% High", "es_created", "pg_created",
]


def _speaker(estimate_id, country_id, created, count=1000, pct=0.1, source="test"):
    return SpeakerEstimate(
        estimate_id=estimate_id,
        country_id=country_id,
        created_date=created,
        estimated_count=count,
        pct_of_population=pct,
        source=source,
    )


def _programmer(estimate_id, country_id, created, mid=100):
    return ProgrammerEstimate(
        estimate_id=estimate_id,
        country_id=country_id,
        created_date=created,
        conservative_est=mid - 10,
        mid_est=mid,
        high_est=mid + 10,
        pct_conservative=0.001,
        pct_mid=0.002,
        pct_high=0.003,
    )


def test_latest_breaks_timestamp_tie_by_higher_id():
    """Same created_date: id 7 beats id 5 regardless of input order."""
    same_day = datetime(2023, 1, 1, tzinfo=timezone.utc)
    a = _speaker(5, 1, same_day, count=5)
    b = _speaker(7, 1, same_day, count=7)

    assert latest([a, b]).estimate_id == 7
    assert latest([b, a]).estimate_id == 7


def test_latest_prefers_newer_timestamp_over_higher_id():
    newer = _speaker(1, 1, datetime(2024, 1, 1, tzinfo=timezone.utc))
    older = _speaker(99, 1, datetime(2023, 1, 1, tzinfo=timezone.utc))

    assert latest([older, newer]).estimate_id == 1


def test_latest_of_empty_history_is_none():
    assert latest([]) is None


def test_naive_timestamps_compare_as_utc():
    """SQLite hands back naive datetimes; they must mix with aware ones."""
    naive = _speaker(1, 1, datetime(2023, 1, 2))
    aware = _speaker(2, 1, datetime(2023, 1, 1, tzinfo=timezone.utc))

    assert naive.created_date.tzinfo is not None
    assert latest([naive, aware]).estimate_id == 1


def test_latest_by_country_groups_by_parent():
    day1 = datetime(2023, 1, 1, tzinfo=timezone.utc)
    day2 = datetime(2023, 2, 1, tzinfo=timezone.utc)
    winners = latest_by_country([
        _speaker(1, 10, day2),
        _speaker(2, 20, day1),
        _speaker(3, 10, day1),
        _speaker(4, 20, day2),
    ])

    assert {country_id: e.estimate_id for country_id, e in winners.items()} == {10: 1, 20: 4}


def test_aggregate_orders_by_name_and_assigns_rank():
    countries = [
        CountryRecord(country_id=3, country_name="India", population=1400),
        CountryRecord(country_id=1, country_name="Brazil", population=210),
        CountryRecord(country_id=2, country_name="canada", population=38),
    ]

    rows = aggregate(countries, [], [])

    assert [r.country_name for r in rows] == ["Brazil", "canada", "India"]
    assert [r.rank for r in rows] == [1, 2, 3]


def test_aggregate_duplicate_names_fall_back_to_country_id():
    countries = [
        CountryRecord(country_id=9, country_name="Congo", population=900),
        CountryRecord(country_id=4, country_name="Congo", population=400),
    ]

    first = aggregate(countries, [], [])
    second = aggregate(list(reversed(countries)), [], [])

    assert [r.population for r in first] == [400, 900]
    assert [r.population for r in second] == [400, 900]
    assert [r.rank for r in first] == [1, 2]


def test_aggregate_leaves_missing_history_absent_not_zero():
    countries = [CountryRecord(country_id=1, country_name="Canada", population=38000000)]
    speakers = [_speaker(1, 1, datetime(2023, 3, 10, tzinfo=timezone.utc), pct=1.2)]

    [row] = aggregate(countries, speakers, [])

    assert row.pct_of_population == 1.2
    assert row.conservative_est is None
    assert row.mid_est is None
    assert row.high_est is None
    assert row.pct_mid is None
    assert row.pg_created is None


def test_aggregate_joins_latest_of_each_stream():
    countries = [CountryRecord(country_id=1, country_name="Germany", population=83000000)]
    programmers = [
        _programmer(4, 1, datetime(2023, 2, 2, tzinfo=timezone.utc), mid=1050000),
        _programmer(5, 1, datetime(2024, 3, 3, tzinfo=timezone.utc), mid=1080000),
    ]
    speakers = [
        _speaker(7, 1, datetime(2022, 11, 20, tzinfo=timezone.utc), count=46000000, source="Eurobarometer"),
    ]

    [row] = aggregate(countries, speakers, programmers)

    assert row.mid_est == 1080000
    assert row.pg_created == datetime(2024, 3, 3, tzinfo=timezone.utc)
    assert row.estimated_count == 46000000
    assert row.source == "Eurobarometer"


def test_stats_row_record_uses_wire_keys_in_column_order():
    row = StatsRow(
        rank=1,
        country_name="Brazil",
        population=210000000,
        es_created=datetime(2023, 1, 1, tzinfo=timezone.utc),
    )

    record = row.to_record()

    assert list(record.keys()) == WIRE_KEYS
    assert record["Country Name"] == "Brazil"
    assert record["Mid Est."] is None
    assert record["es_created"] == "2023-01-01T00:00:00Z"
